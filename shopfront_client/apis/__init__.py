from .auth_api import AuthApi
from .products_api import ProductsApi

__all__ = ["AuthApi", "ProductsApi"]
