from .constant import VERSION as __version__
