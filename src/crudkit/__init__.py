"""
crudkit - generic CRUD data access and REST exposure.

Give crudkit a mapped record type with a public identifier and it provides
paged querying, keyword lookup, bulk mutation and a fixed set of REST
endpoints, with no hand-written repository or controller per entity.

- crudkit.core: paging model, identifier generation, CRUD service, record store
- crudkit.api: FastAPI exposure layer
- crudkit.addressbook: sample application
- crudkit.cli: command line entry point
"""

__version__ = "0.1.0"

from crudkit.core import *  # noqa
