"""
Note Schemas.

Pydantic types handed across the store boundary. ORM rows never leave
the store; callers get frozen ``NoteRead`` snapshots or edit a
``NoteDraft``.
"""

from pydantic import BaseModel, ConfigDict, Field

from mynotes.models.note import NEW_NOTE_ID


class NoteFields(BaseModel):
    """Editable note fields. Empty title and content are allowed."""

    title: str = Field(default="", description="Note title")
    content: str = Field(default="", description="Free text, e.g. a phone number")
    category: str = Field(default="", description="Label such as Phone or Home")
    can_be_checked_off: bool = Field(default=False, description="Note is a checklist item")
    is_checked_off: bool = Field(default=False, description="Checked state of a checklist item")
    color_id: int = Field(default=1, description="Palette color id")
    is_in_trash: bool = Field(default=False, description="Soft-delete flag")


class NoteDraft(NoteFields):
    """
    In-memory note being created or edited.

    Assignment is validated, so a field update with the wrong type fails
    immediately instead of at save time.
    """

    id: int = Field(default=NEW_NOTE_ID, ge=0)

    model_config = ConfigDict(validate_assignment=True, from_attributes=True)

    @property
    def is_new(self) -> bool:
        """True while the draft has not been persisted."""
        return self.id == NEW_NOTE_ID


class NoteRead(NoteFields):
    """Immutable snapshot of a stored note."""

    id: int = Field(ge=1, description="Store-assigned id")

    model_config = ConfigDict(from_attributes=True, frozen=True)


EDITABLE_FIELDS = frozenset(NoteFields.model_fields)
"""Field names accepted by a draft update."""
