from .unit_of_work import SqlAlchemyUnitOfWork
from .customer_directory import (
    HttpCustomerDirectory,
    StaticCustomerDirectory,
    create_customer_directory,
)

__all__ = [
    "SqlAlchemyUnitOfWork",
    "HttpCustomerDirectory",
    "StaticCustomerDirectory",
    "create_customer_directory",
]
