"""
Document Service.

Validates template fields, renders the text and stores the result.
Documents attached to a dispute also append a ``document_added`` event
to that dispute's timeline.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ValidationError
from modules.backend.core.utils import utc_now
from modules.backend.models.dispute import TimelineEventType
from modules.backend.models.document import Document, DocumentType
from modules.backend.models.user import User
from modules.backend.repositories.dispute import DisputeRepository, TimelineRepository
from modules.backend.repositories.document import DocumentRepository
from modules.backend.schemas.document import (
    DocumentGenerateRequest,
    TemplateField,
    TemplateResponse,
)
from modules.backend.services.base import BaseService
from modules.backend.services.document_templates import TEMPLATES, validate_fields
from modules.backend.services.notification import NotificationService
from modules.backend.services.usage_limits import UsageLimitService


class DocumentService(BaseService):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = DocumentRepository(session)
        self.disputes = DisputeRepository(session)
        self.timeline = TimelineRepository(session)

    @staticmethod
    def list_templates() -> list[TemplateResponse]:
        return [
            TemplateResponse(
                id=template.id.value,
                name=template.name,
                description=template.description,
                fields=[
                    TemplateField(
                        name=spec.name,
                        label=spec.label,
                        type=spec.type,
                        required=spec.required,
                        options=list(spec.options) or None,
                    )
                    for spec in template.fields
                ],
            )
            for template in TEMPLATES.values()
        ]

    async def generate_document(self, user: User, data: DocumentGenerateRequest) -> Document:
        """
        Render a template and persist the document.

        Raises:
            UsageLimitError: Monthly document quota used up
            NotFoundError: ``dispute_id`` is not one of the user's disputes
            ValidationError: Field values failed template validation
        """
        await UsageLimitService(self.session).check(user, "documents")

        dispute = None
        if data.dispute_id:
            dispute = await self.disputes.get_owned(data.dispute_id, user.id)

        template = TEMPLATES[data.template]
        errors = validate_fields(template, data.fields)
        if errors:
            raise ValidationError(
                "Document fields are invalid",
                details={"errors": errors},
            )

        content = template.render(data.fields)
        title = data.title or template.title(data.fields)
        metadata: dict[str, Any] = {
            "template_name": template.name,
            "generated_at": utc_now().isoformat(),
            "length": len(content),
            **template.extra(data.fields),
        }

        document = await self._execute_db_operation(
            "generate_document",
            self.repo.create(
                user_id=user.id,
                dispute_id=dispute.id if dispute else None,
                document_type=template.id.value,
                title=title,
                content=content,
                fields=data.fields,
                extra_data=metadata,
            ),
        )

        if dispute is not None:
            await self._execute_db_operation(
                "add_document_event",
                self.timeline.create(
                    dispute_id=dispute.id,
                    user_id=user.id,
                    event_type=TimelineEventType.DOCUMENT_ADDED.value,
                    title=f"Добавлен документ: {title}",
                    event_data={"document_id": document.id, "document_type": template.id.value},
                ),
            )

        self._log_operation(
            "Document generated",
            user_id=user.id,
            document_id=document.id,
            template=template.id.value,
        )
        await NotificationService(self.session).notify(
            user,
            "document_ready",
            {"document_title": title},
            data={"document_id": document.id},
        )
        return document

    async def get_document(self, user: User, document_id: str) -> Document:
        return await self.repo.get_owned(document_id, user.id)

    async def list_documents(
        self,
        user: User,
        document_type: DocumentType | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Document], int]:
        filters = {"document_type": document_type.value if document_type else None}
        items = await self.repo.list_for_user(user.id, limit=limit, offset=offset, filters=filters)
        total = await self.repo.count_for_user(user.id, filters=filters)
        return items, total

    async def delete_document(self, user: User, document_id: str) -> None:
        document = await self.repo.get_owned(document_id, user.id)
        await self.session.delete(document)
        await self._execute_db_operation("delete_document", self.session.flush())
        self._log_operation("Document deleted", document_id=document_id)
