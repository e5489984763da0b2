# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Account provisioning service.

Creating an account touches two collaborators: the identity provider
(login credential) and the relational store (profile, role link and
subject assignments). The work runs as a saga:

1. create_credential          compensated by deleting the credential
2. insert_profile             compensated by rolling back the transaction
3. insert_role_link
4. insert_subject_assignments (teachers only)
5. commit

The rollback compensation of step 2 also discards everything flushed by
steps 3 and 4, so those need no compensation of their own. If any
compensation fails the caller gets ProvisioningInconsistentError with the
orphaned credential reference, which needs manual reconciliation.
If the calling task is cancelled the same compensations run before the
cancellation propagates.

Example:
    >>> provisioner = AccountProvisioner(db, identity, allocator)
    >>> account = await provisioner.provision_student(
    ...     StudentProvisionRequest(display_name="Ada Obi", class_level="JSS1")
    ... )
    >>> account.identifier
    '0001'
"""

import asyncio
import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.config.settings import Settings
from src.core.saga import (
    Saga,
    SagaAborted,
    SagaCompleted,
    SagaContext,
    SagaInconsistent,
    SagaStep,
)
from src.domains.errors import (
    CollaboratorUnavailableError,
    DuplicateIdentifierError,
    PortalError,
    ProvisioningInconsistentError,
    ValidationError,
)
from src.domains.provisioning.policies import (
    PasswordPolicy,
    TeacherHandlePolicy,
    extract_surname,
)
from src.domains.sequence import STUDENT_SPACE, SequenceAllocator, format_identifier
from src.infrastructure.database.models import (
    RoleCode,
    Student,
    Teacher,
    TeacherSubject,
    UserRole,
)
from src.infrastructure.identity import DuplicateHandleError, IdentityProvider
from src.models.provisioning import (
    ProvisionedAccount,
    StudentProvisionRequest,
    TeacherProvisionRequest,
)

logger = logging.getLogger(__name__)

ProvisionRequest = TeacherProvisionRequest | StudentProvisionRequest


def _require(value: str | None, field: str) -> str:
    """Return a stripped required field or raise ValidationError."""
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", details={"field": field})
    return value.strip()


def _role_from(role: str | RoleCode) -> RoleCode:
    if isinstance(role, RoleCode):
        return role
    try:
        return RoleCode[role.upper()]
    except KeyError:
        raise ValidationError(f"Unknown role: {role}", details={"field": "role"}) from None


class AccountProvisioner:
    """Provisions teacher and student accounts.

    Attributes:
        handle_retries: Fresh teacher handles tried after a duplicate.
        step_timeout: Per-step timeout in seconds, None to disable.
        identifier_width: Zero-padding width of student identifiers.
    """

    def __init__(
        self,
        db: AsyncSession,
        identity: IdentityProvider,
        allocator: SequenceAllocator,
        handle_policy: TeacherHandlePolicy | None = None,
        password_policy: PasswordPolicy | None = None,
        handle_retries: int = 5,
        step_timeout: float | None = None,
        identifier_width: int = 4,
    ) -> None:
        """Initialize the provisioner.

        Args:
            db: Request-scoped database session.
            identity: Identity provider client.
            allocator: Sequence allocator for student identifiers.
            handle_policy: Teacher handle policy.
            password_policy: Initial password policy.
            handle_retries: Fresh teacher handles tried after a duplicate.
            step_timeout: Per-step timeout in seconds.
            identifier_width: Zero-padding width of student identifiers.
        """
        self._db = db
        self._identity = identity
        self._allocator = allocator
        self._handle_policy = handle_policy or TeacherHandlePolicy()
        self._password_policy = password_policy or PasswordPolicy()
        self.handle_retries = handle_retries
        self.step_timeout = step_timeout
        self.identifier_width = identifier_width

    @classmethod
    def from_settings(
        cls,
        db: AsyncSession,
        identity: IdentityProvider,
        allocator: SequenceAllocator,
        settings: Settings,
    ) -> "AccountProvisioner":
        """Build a provisioner configured from application settings."""
        provisioning = settings.provisioning
        return cls(
            db=db,
            identity=identity,
            allocator=allocator,
            password_policy=PasswordPolicy(
                provisioning.password_policy,
                length=provisioning.random_password_length,
            ),
            handle_retries=provisioning.handle_retries,
            step_timeout=provisioning.step_timeout_seconds,
            identifier_width=provisioning.identifier_width,
        )

    async def provision_teacher(self, request: TeacherProvisionRequest) -> ProvisionedAccount:
        """Provision a teacher account."""
        return await self.provision(RoleCode.TEACHER, request)

    async def provision_student(self, request: StudentProvisionRequest) -> ProvisionedAccount:
        """Provision a student account."""
        return await self.provision(RoleCode.STUDENT, request)

    async def provision(
        self,
        role: str | RoleCode,
        request: ProvisionRequest,
    ) -> ProvisionedAccount:
        """Provision one account end to end.

        Args:
            role: "teacher" or "student".
            request: Profile fields for the role.

        Returns:
            The provisioned account, including its initial password.

        Raises:
            ValidationError: Missing fields; nothing was created.
            DuplicateIdentifierError: The identifier is taken.
            AllocationExhaustedError: No student identifier could be allocated.
            CollaboratorUnavailableError: A collaborator failed; everything
                was rolled back.
            ProvisioningInconsistentError: Rollback failed; partial state remains.
        """
        role_code = _role_from(role)
        context = self._validate(role_code, request)
        context["password"] = self._password_policy.initial_password(context["role"])

        if role_code == RoleCode.STUDENT:
            ordinal = await self._allocator.allocate(STUDENT_SPACE)
            context["identifier"] = format_identifier(ordinal, self.identifier_width)

        saga = Saga(f"provision_{context['role']}", self._steps(role_code), self.step_timeout)
        try:
            outcome = await saga.run(context)
        except asyncio.CancelledError:
            if isinstance(saga.cancelled_outcome, SagaInconsistent):
                partial = saga.cancelled_outcome.context
                logger.error(
                    "Cancelled provisioning of %s %s left partial state; orphaned credential %s",
                    partial["role"],
                    partial.get("identifier"),
                    partial.get("create_credential"),
                )
            raise

        match outcome:
            case SagaCompleted(results=results):
                logger.info(
                    "Provisioned %s account %s (profile=%s)",
                    results["role"],
                    results["identifier"],
                    results["insert_profile"],
                )
                return ProvisionedAccount(
                    role=results["role"],
                    display_name=results["display_name"],
                    identifier=results["identifier"],
                    credential_ref=results["create_credential"],
                    profile_ref=results["insert_profile"],
                    initial_password=results["password"],
                    class_assignment=results.get("class_assignment"),
                    subject_ids=results.get("subject_ids", []),
                )
            case SagaAborted(failed_step=failed_step, error=error, context=saga_context):
                raise self._aborted_error(saga_context, failed_step, error)
            case SagaInconsistent(
                failed_step=failed_step,
                error=error,
                compensation_failures=failures,
                context=saga_context,
            ):
                credential_ref = saga_context.get("create_credential")
                logger.error(
                    "Provisioning of %s %s left partial state: step %s failed (%s), "
                    "compensation failed for %s; orphaned credential %s",
                    saga_context["role"],
                    saga_context.get("identifier"),
                    failed_step,
                    type(error).__name__,
                    ", ".join(failure.step for failure in failures),
                    credential_ref,
                )
                raise ProvisioningInconsistentError(
                    "Account provisioning failed and could not be rolled back; "
                    "manual reconciliation required",
                    details={
                        "role": saga_context["role"],
                        "identifier": saga_context.get("identifier"),
                        "credential_ref": credential_ref,
                        "failed_step": failed_step,
                        "failed_compensations": [failure.step for failure in failures],
                    },
                )

    def _validate(self, role: RoleCode, request: ProvisionRequest) -> SagaContext:
        """Check required fields and build the initial saga context."""
        display_name = _require(request.display_name, "display_name")

        match role, request:
            case RoleCode.TEACHER, TeacherProvisionRequest():
                subject_ids: list[str] = []
                for subject_id in request.subject_ids:
                    subject_id = _require(subject_id, "subject_ids")
                    if subject_id not in subject_ids:
                        subject_ids.append(subject_id)
                return {
                    "role": "teacher",
                    "display_name": display_name,
                    "surname": extract_surname(display_name),
                    "email": request.email.strip() if request.email else None,
                    "class_assignment": request.class_assignment,
                    "subject_ids": subject_ids,
                }
            case RoleCode.STUDENT, StudentProvisionRequest():
                class_level = _require(request.class_level, "class_level")
                return {
                    "role": "student",
                    "display_name": display_name,
                    "class_assignment": class_level,
                }
            case _:
                raise ValidationError(
                    f"Cannot provision role {role.name.lower()} from {type(request).__name__}",
                    details={"field": "role"},
                )

    def _steps(self, role: RoleCode) -> list[SagaStep]:
        steps = [
            SagaStep(
                "create_credential",
                self._create_teacher_credential if role == RoleCode.TEACHER else self._create_credential,
                compensation=self._delete_credential,
            ),
            SagaStep(
                "insert_profile",
                self._insert_teacher if role == RoleCode.TEACHER else self._insert_student,
                compensation=self._rollback,
                compensate_on_failure=True,
            ),
            SagaStep("insert_role_link", self._insert_role_link),
        ]
        if role == RoleCode.TEACHER:
            steps.append(SagaStep("insert_subject_assignments", self._insert_subject_assignments))
        steps.append(SagaStep("commit", self._commit))
        return steps

    # Saga steps

    def _credential_metadata(self, context: SagaContext) -> dict[str, Any]:
        metadata: dict[str, Any] = {
            "role": context["role"],
            "name": context["display_name"],
            "identifier": context["identifier"],
        }
        if context["role"] == "student":
            metadata["class_level"] = context["class_assignment"]
        else:
            metadata["subjects"] = context["subject_ids"]
        return metadata

    async def _create_credential(self, context: SagaContext) -> str:
        return await self._identity.create_credential(
            context["identifier"],
            context["password"],
            self._credential_metadata(context),
        )

    async def _create_teacher_credential(self, context: SagaContext) -> str:
        """Create the credential, drawing a new handle on each duplicate."""
        attempt = 1
        while True:
            context["identifier"] = self._handle_policy.generate(context["display_name"])
            try:
                return await self._create_credential(context)
            except DuplicateHandleError:
                if attempt > self.handle_retries:
                    raise
                logger.info(
                    "Teacher handle %s taken, regenerating (retry %d/%d)",
                    context["identifier"],
                    attempt,
                    self.handle_retries,
                )
                attempt += 1

    async def _delete_credential(self, context: SagaContext) -> None:
        await self._identity.delete_credential(context["create_credential"])

    async def _insert_teacher(self, context: SagaContext) -> str:
        teacher = Teacher(
            identifier=context["identifier"],
            display_name=context["display_name"],
            surname=context["surname"],
            email=context["email"],
            class_assignment=context["class_assignment"],
        )
        self._db.add(teacher)
        await self._db.flush()
        return teacher.id

    async def _insert_student(self, context: SagaContext) -> str:
        student = Student(
            identifier=context["identifier"],
            display_name=context["display_name"],
            class_level=context["class_assignment"],
        )
        self._db.add(student)
        await self._db.flush()
        return student.id

    async def _insert_role_link(self, context: SagaContext) -> str:
        link = UserRole(
            credential_ref=context["create_credential"],
            role_code=int(RoleCode[context["role"].upper()]),
            profile_id=context["insert_profile"],
            identifier=context["identifier"],
        )
        self._db.add(link)
        await self._db.flush()
        return link.id

    async def _insert_subject_assignments(self, context: SagaContext) -> list[str]:
        rows = [
            TeacherSubject(teacher_id=context["insert_profile"], subject_id=subject_id)
            for subject_id in context["subject_ids"]
        ]
        if rows:
            self._db.add_all(rows)
            await self._db.flush()
        return [row.id for row in rows]

    async def _commit(self, context: SagaContext) -> None:
        await self._db.commit()

    async def _rollback(self, context: SagaContext) -> None:
        await self._db.rollback()

    # Outcome mapping

    @staticmethod
    def _aborted_error(context: SagaContext, failed_step: str, error: Exception) -> PortalError:
        """Translate a cleanly rolled back failure into a domain error."""
        details = {
            "role": context["role"],
            "identifier": context.get("identifier"),
            "failed_step": failed_step,
        }

        if isinstance(error, DuplicateHandleError) or (
            isinstance(error, IntegrityError) and failed_step == "insert_profile"
        ):
            return DuplicateIdentifierError(
                f"Identifier {context.get('identifier')} is already taken",
                details=details,
            )
        if isinstance(error, PortalError):
            return error
        if isinstance(error, TimeoutError):
            return CollaboratorUnavailableError(
                f"Provisioning step {failed_step} timed out",
                details=details,
            )
        return CollaboratorUnavailableError(
            f"Provisioning step {failed_step} failed: {type(error).__name__}",
            details=details,
        )
