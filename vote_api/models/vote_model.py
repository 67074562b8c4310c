from typing import Optional

from pydantic import BaseModel


class Vote(BaseModel):
    # Every field is optional here so that the service reports missing
    # fields in its own order instead of pydantic's.
    name: Optional[str] = None
    matricule: Optional[str] = None
    choice: Optional[str] = None
    opinion: Optional[str] = None
