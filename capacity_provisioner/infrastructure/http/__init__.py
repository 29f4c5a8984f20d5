def __getattr__(name):
    if name in ("create_admin_api", "AdminServices"):
        from .admin_api import create_admin_api, AdminServices
        return {"create_admin_api": create_admin_api, "AdminServices": AdminServices}[name]
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "create_admin_api", "AdminServices",
]
