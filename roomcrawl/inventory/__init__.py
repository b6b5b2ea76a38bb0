from .bag import Inventory  # noqa: F401
