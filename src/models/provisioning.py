# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account provisioning schemas.

Required fields are declared optional here on purpose: presence is
checked by the provisioner so that direct callers and HTTP callers get
the same ValidationError before any side effect.
"""

from pydantic import BaseModel, ConfigDict, Field


class TeacherProvisionRequest(BaseModel):
    """Fields for a new teacher account."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(default=None, alias="name", max_length=200)
    email: str | None = Field(default=None, max_length=255, description="Contact email")
    class_assignment: str | None = Field(default=None, max_length=50)
    subject_ids: list[str] = Field(default_factory=list, alias="subjects")


class StudentProvisionRequest(BaseModel):
    """Fields for a new student account."""

    model_config = ConfigDict(populate_by_name=True)

    display_name: str | None = Field(default=None, alias="name", max_length=200)
    class_level: str | None = Field(default=None, alias="classLevel", max_length=50)


class ProvisionedAccount(BaseModel):
    """A fully provisioned account.

    ``initial_password`` is handed out exactly once, here.
    """

    role: str
    display_name: str
    identifier: str
    credential_ref: str
    profile_ref: str
    initial_password: str
    class_assignment: str | None = None
    subject_ids: list[str] = Field(default_factory=list)


class ProvisionResponse(BaseModel):
    """Response for the provisioning endpoints."""

    success: bool = True
    role: str
    display_name: str
    identifier: str
    initial_password: str
    profile_ref: str
    class_assignment: str | None = None
    subject_ids: list[str] = Field(default_factory=list)

    @classmethod
    def from_account(cls, account: ProvisionedAccount) -> "ProvisionResponse":
        """Build the response, leaving out the credential reference."""
        return cls(
            role=account.role,
            display_name=account.display_name,
            identifier=account.identifier,
            initial_password=account.initial_password,
            profile_ref=account.profile_ref,
            class_assignment=account.class_assignment,
            subject_ids=account.subject_ids,
        )
