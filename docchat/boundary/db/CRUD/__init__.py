"""CRUD operation classes and singletons."""

from docchat.boundary.db.CRUD.base_crud import BaseCRUD
from docchat.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from docchat.boundary.db.CRUD.message_crud import MessageCRUD, message_crud

__all__ = [
    "BaseCRUD",
    "DocumentCRUD",
    "MessageCRUD",
    "document_crud",
    "message_crud",
]
