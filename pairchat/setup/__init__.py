from pairchat.setup.wiring import ChatServices, create_services

__all__ = ["ChatServices", "create_services"]
