from asset_register.models.category import AssetCategory
from asset_register.models.asset import FixedAsset

__all__ = [
    "AssetCategory",
    "FixedAsset",
]
