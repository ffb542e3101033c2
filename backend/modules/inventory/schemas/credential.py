"""Схемы для учётных данных оборудования."""
from typing import List

from pydantic import BaseModel


class CredentialIn(BaseModel):
    name: str = ""
    secret: str = ""


class CredentialOut(BaseModel):
    id: int
    name: str
    secret: str


class CredentialSetIn(BaseModel):
    credentials: List[CredentialIn] = []
