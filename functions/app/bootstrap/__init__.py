from functions.app.bootstrap.container import add_logging, component_logger, create_container
from functions.app.bootstrap.extensions import add_required_services, add_service, configure
from functions.app.bootstrap.services import AwesomeService, AwesomeServiceOptions, Service

__all__ = [
    "AwesomeService",
    "AwesomeServiceOptions",
    "Service",
    "add_logging",
    "add_required_services",
    "add_service",
    "component_logger",
    "configure",
    "create_container",
]
