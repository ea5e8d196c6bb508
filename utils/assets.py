"""
Static asset loading for ExprQuartiles
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union

from loguru import logger


class MissingAssetError(FileNotFoundError):
    """Requested asset does not exist"""


class AssetLoader(ABC):
    """Load a static text asset by name"""

    @abstractmethod
    def load(self, name: str) -> str:
        """Asset contents, MissingAssetError if there is none"""


class DirectoryAssetLoader(AssetLoader):
    """Assets stored as files in a directory"""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def load(self, name: str) -> str:
        path = (self.directory / name).resolve()
        if self.directory.resolve() not in path.parents:
            raise MissingAssetError(f"Asset outside of {self.directory}: {name}")
        if not path.is_file():
            raise MissingAssetError(f"Asset not found: {path}")
        logger.debug(f"Loaded asset: {path}")
        return path.read_text(encoding='utf-8')


class DictAssetLoader(AssetLoader):
    """In-memory assets, mostly for embedding and tests"""

    def __init__(self, assets: Optional[Dict[str, str]] = None):
        self.assets = dict(assets or {})

    def load(self, name: str) -> str:
        try:
            return self.assets[name]
        except KeyError:
            raise MissingAssetError(f"Asset not found: {name}") from None


def default_asset_loader() -> AssetLoader:
    """Loader for the bundled inline help documents"""
    from config import config
    return DirectoryAssetLoader(config.paths.inline_help_dir)
