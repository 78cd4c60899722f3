from .monitor_service import ContainerMonitorService

__all__ = ["ContainerMonitorService"]
