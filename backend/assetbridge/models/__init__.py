from assetbridge.models.asset import Asset, AssetStatus

__all__ = [
    "Asset", "AssetStatus",
]
