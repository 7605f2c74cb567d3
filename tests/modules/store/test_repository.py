"""
Tests for the store repository against an in-memory database.

These tests cover:
- Create / read / update / delete per entity kind
- Placeholder ids insert, durable ids update in place
- File uploads before the write, and failed uploads keeping the stored URL
- Notifications with attachments and the read flag
- Master template replacement
- Requirement upsert
- Saving then reading back every mapped kind
"""

from datetime import date, time
from uuid import uuid4

import pytest
from pydantic import BaseModel

from sat_portal.core.exceptions import NotFoundError, ValidationError
from sat_portal.modules.store import repository
from sat_portal.modules.store.mapping import ALL_MAPPINGS, ENTITY_MAPPINGS
from sat_portal.modules.store.models import ApplicationStatus, RequirementType, SeminarType
from sat_portal.modules.store.schemas import (
    InternshipRegistration,
    Lecturer,
    Notification,
    NotificationAttachment,
    PendingFile,
    Requirement,
    SeminarRegistration,
    StoredFile,
    ThesisDefense,
    ThesisRegistration,
    is_placeholder_id,
)


class TestSaveEntity:
    """Tests for save_entity and get_entity."""

    @pytest.mark.asyncio
    async def test_placeholder_id_inserts(self, db):
        proposal = ThesisRegistration(student_id=str(uuid4()), title="Judul")
        assert is_placeholder_id(proposal.id)

        result = await repository.save_entity(db, proposal)

        assert result.complete
        assert not is_placeholder_id(result.entity.id)
        stored = await repository.get_entity(db, "thesis", result.entity.id)
        assert stored == result.entity

    @pytest.mark.asyncio
    async def test_durable_id_updates_in_place(self, db):
        saved = (await repository.save_entity(db, Lecturer(name="Budi", nip="1"))).entity

        updated = await repository.save_entity(db, saved.model_copy(update={"nip": "2"}))

        assert updated.entity.id == saved.id
        lecturers = await repository.list_entities(db, "lecturer")
        assert [lecturer.nip for lecturer in lecturers] == ["2"]

    @pytest.mark.asyncio
    async def test_get_placeholder_returns_none(self, db):
        assert await repository.get_entity(db, "thesis", "tmp-123") is None

    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, db):
        assert await repository.get_entity(db, "thesis", str(uuid4())) is None

    @pytest.mark.asyncio
    async def test_invalid_reference_is_validation_error(self, db):
        proposal = ThesisRegistration(student_id="not-a-uuid")

        with pytest.raises(ValidationError):
            await repository.save_entity(db, proposal)


class TestUploads:
    """Tests for pending file handling."""

    @pytest.mark.asyncio
    async def test_pending_file_uploaded_before_write(self, db, storage):
        seminar = SeminarRegistration(
            type=SeminarType.PROPOSAL,
            student_id=str(uuid4()),
            file_report=PendingFile(filename="proposal.pdf", content=b"%PDF"),
        )

        result = await repository.save_entity(db, seminar, storage)

        assert result.complete
        assert storage.uploads == [("seminars", "proposal.pdf")]
        assert result.entity.file_report == StoredFile(
            url="https://files.example.test/seminars/proposal.pdf"
        )

    @pytest.mark.asyncio
    async def test_failed_upload_keeps_stored_url(self, db, failing_storage):
        seminar = SeminarRegistration(
            type=SeminarType.PROPOSAL,
            student_id=str(uuid4()),
            file_report=StoredFile(url="https://files.example.test/old.pdf"),
        )
        saved = (await repository.save_entity(db, seminar)).entity

        result = await repository.save_entity(
            db,
            saved.model_copy(
                update={
                    "title": "Baru",
                    "file_report": PendingFile(filename="laporan.pdf", content=b"%PDF"),
                }
            ),
            failing_storage,
        )

        assert not result.complete
        assert result.failed_uploads == ["file_report"]
        stored = await repository.get_entity(db, "seminar", saved.id)
        assert stored.title == "Baru"
        assert stored.file_report == StoredFile(url="https://files.example.test/old.pdf")

    @pytest.mark.asyncio
    async def test_upload_files_falls_back_to_previous(self, failing_storage):
        previous = ThesisDefense(
            student_id=str(uuid4()),
            file_fixed=StoredFile(url="https://files.example.test/naskah-lama.pdf"),
        )
        draft = previous.model_copy(
            update={
                "file_fixed": PendingFile(filename="naskah.pdf", content=b"x"),
                "file_plagiarism": PendingFile(filename="turnitin.pdf", content=b"y"),
            }
        )

        uploaded, failed = await repository.upload_files(draft, failing_storage, previous)

        assert failed == ["file_fixed"]
        assert uploaded.file_fixed == previous.file_fixed
        assert uploaded.file_plagiarism == StoredFile(
            url="https://files.example.test/defenses/turnitin.pdf"
        )


class TestListAndDelete:
    """Tests for list_entities and delete_entity."""

    @pytest.mark.asyncio
    async def test_list_filters_by_student_and_status(self, db):
        student_id = str(uuid4())
        await repository.save_entity(
            db,
            InternshipRegistration(
                student_id=student_id, company_name="A", status=ApplicationStatus.SUBMITTED
            ),
        )
        await repository.save_entity(
            db, InternshipRegistration(student_id=str(uuid4()), company_name="B")
        )

        mine = await repository.list_entities(db, "internship", student_id=student_id)
        pending = await repository.list_entities(
            db, "internship", status=ApplicationStatus.SUBMITTED
        )

        assert [i.company_name for i in mine] == ["A"]
        assert [i.company_name for i in pending] == ["A"]

    @pytest.mark.asyncio
    async def test_list_with_placeholder_filter_is_empty(self, db):
        assert await repository.list_entities(db, "thesis", student_id="tmp-1") == []

    @pytest.mark.asyncio
    async def test_delete(self, db):
        saved = (await repository.save_entity(db, Lecturer(name="Budi", nip="1"))).entity

        await repository.delete_entity(db, "lecturer", saved.id)

        assert await repository.list_entities(db, "lecturer") == []

    @pytest.mark.asyncio
    async def test_delete_missing(self, db):
        with pytest.raises(NotFoundError):
            await repository.delete_entity(db, "lecturer", str(uuid4()))

    @pytest.mark.asyncio
    async def test_delete_placeholder(self, db):
        with pytest.raises(NotFoundError):
            await repository.delete_entity(db, "lecturer", "tmp-abc")


class TestNotifications:
    """Tests for notification persistence."""

    @pytest.mark.asyncio
    async def test_insert_with_attachment(self, db):
        user_id = str(uuid4())
        notification = Notification(
            user_id=user_id,
            subject="Undangan",
            message="Halo",
            attachments=[
                NotificationAttachment(
                    filename="undangan.docx", mime_type="application/x-test", content=b"doc"
                )
            ],
        )

        stored = await repository.insert_notification(db, notification)
        listed = await repository.list_notifications(db, user_id)

        assert not is_placeholder_id(stored.id)
        assert len(listed) == 1
        assert listed[0].id == stored.id
        assert listed[0].is_read is False
        assert listed[0].attachments[0].content == b"doc"

        attachment = await repository.get_attachment(
            db, stored.id, stored.attachments[0].id
        )
        assert attachment.filename == "undangan.docx"

    @pytest.mark.asyncio
    async def test_list_only_recipient(self, db):
        await repository.insert_notification(
            db, Notification(user_id=str(uuid4()), subject="A", message="a")
        )

        assert await repository.list_notifications(db, str(uuid4())) == []

    @pytest.mark.asyncio
    async def test_mark_read_is_idempotent(self, db):
        user_id = str(uuid4())
        stored = await repository.insert_notification(
            db, Notification(user_id=user_id, subject="A", message="a")
        )

        await repository.set_notification_read(db, stored.id)
        await repository.set_notification_read(db, stored.id)

        listed = await repository.list_notifications(db, user_id)
        assert listed[0].is_read is True

    @pytest.mark.asyncio
    async def test_mark_read_missing(self, db):
        with pytest.raises(NotFoundError):
            await repository.set_notification_read(db, str(uuid4()))

    @pytest.mark.asyncio
    async def test_attachment_of_other_notification(self, db):
        stored = await repository.insert_notification(
            db,
            Notification(
                user_id=str(uuid4()),
                subject="A",
                message="a",
                attachments=[
                    NotificationAttachment(filename="a.docx", mime_type="x", content=b"a")
                ],
            ),
        )

        with pytest.raises(NotFoundError):
            await repository.get_attachment(db, str(uuid4()), stored.attachments[0].id)


class TestTemplateAndRequirements:
    """Tests for the master template and requirement texts."""

    @pytest.mark.asyncio
    async def test_no_template(self, db):
        assert await repository.get_template(db) is None

    @pytest.mark.asyncio
    async def test_replace_template(self, db):
        await repository.replace_template(db, "lama.docx", b"old")
        await repository.replace_template(db, "baru.docx", b"new")

        template = await repository.get_template(db)

        assert template.name == "baru.docx"
        assert template.content == b"new"

    @pytest.mark.asyncio
    async def test_requirement_upsert(self, db):
        assert await repository.get_requirement(db, RequirementType.SIDANG) is None

        await repository.save_requirement(
            db, Requirement(type=RequirementType.SIDANG, content="1. Naskah")
        )
        await repository.save_requirement(
            db, Requirement(type=RequirementType.SIDANG, content="1. Naskah Fixed")
        )

        stored = await repository.get_requirement(db, RequirementType.SIDANG)
        assert stored.content == "1. Naskah Fixed"


def _filename(attachment: NotificationAttachment) -> str:
    return attachment.filename


def _sample_entity(kind: str, student_id: str, lecturer_id: str, thesis_id: str) -> BaseModel:
    """A fully populated entity of one generic kind."""
    samples = {
        "thesis": ThesisRegistration(
            student_id=student_id,
            student_name="Ani",
            title="Judul",
            advisor1_id=lecturer_id,
            advisor2_id=lecturer_id,
            status=ApplicationStatus.APPROVED,
        ),
        "seminar": SeminarRegistration(
            type=SeminarType.HASIL,
            student_id=student_id,
            student_name="Ani",
            title="Judul",
            file_report=StoredFile(url="https://files.example.test/r.pdf"),
            advisor1_id=lecturer_id,
            scheduled_date=date(2024, 6, 20),
            scheduled_time=time(9, 30),
            scheduled_room="R.1",
            examiner1_id=lecturer_id,
            status=ApplicationStatus.SCHEDULED,
        ),
        "defense": ThesisDefense(
            thesis_id=thesis_id,
            student_id=student_id,
            student_name="Ani",
            file_fixed=StoredFile(url="https://files.example.test/f.pdf"),
            sks_count=144,
            admin_requirements_met=True,
            examiner1_id=lecturer_id,
            defense_date=date(2024, 7, 1),
            defense_time=time(13, 0),
            defense_room="Aula",
            letter_number="001/UN/2024",
            status=ApplicationStatus.SUBMITTED,
        ),
        "internship": InternshipRegistration(
            student_id=student_id,
            student_name="Ani",
            company_name="PT Maju",
            advisor_id=lecturer_id,
            status=ApplicationStatus.REJECTED,
        ),
        "lecturer": Lecturer(name="Citra", nip="2", specialization="Basis Data"),
    }
    return samples[kind]


class TestRoundTrip:
    """Saving then reading back returns what was saved, for every mapping."""

    def test_every_mapping_is_covered(self):
        dedicated = {"notification", "attachment", "template", "requirement"}

        assert {mapping.kind for mapping in ALL_MAPPINGS} == set(ENTITY_MAPPINGS) | dedicated

    @pytest.mark.asyncio
    @pytest.mark.parametrize("kind", sorted(ENTITY_MAPPINGS))
    async def test_generic_kind(self, db, kind):
        lecturer = (await repository.save_entity(db, Lecturer(name="Budi", nip="1"))).entity
        thesis = (
            await repository.save_entity(db, ThesisRegistration(student_id=str(uuid4())))
        ).entity
        entity = _sample_entity(kind, str(uuid4()), lecturer.id, thesis.id)

        saved = (await repository.save_entity(db, entity)).entity
        expected = entity.model_copy(update={"id": saved.id})
        db.expire_all()
        listed = await repository.list_entities(db, kind, id=saved.id)

        assert saved == expected
        assert listed == [expected]

    @pytest.mark.asyncio
    async def test_notification_with_attachments(self, db):
        notification = Notification(
            user_id=str(uuid4()),
            subject="Undangan",
            message="Halo",
            attachments=[
                NotificationAttachment(filename="a.docx", mime_type="x", content=b"a"),
                NotificationAttachment(filename="b.docx", mime_type="y", content=b"b"),
            ],
        )

        stored = await repository.insert_notification(db, notification)
        listed = await repository.list_notifications(db, notification.user_id)

        assert len(listed) == 1
        assert listed[0].model_dump(exclude={"attachments"}) == stored.model_dump(
            exclude={"attachments"}
        )
        assert sorted(listed[0].attachments, key=_filename) == sorted(
            stored.attachments, key=_filename
        )
        assert stored.model_dump(exclude={"id", "attachments"}) == notification.model_dump(
            exclude={"id", "attachments"}
        )
        assert [a.model_dump(exclude={"id"}) for a in stored.attachments] == [
            a.model_dump(exclude={"id"}) for a in notification.attachments
        ]

    @pytest.mark.asyncio
    async def test_template(self, db):
        stored = await repository.replace_template(db, "undangan.docx", b"docx-bytes")

        fetched = await repository.get_template(db)

        assert fetched == stored
        assert (fetched.name, fetched.content) == ("undangan.docx", b"docx-bytes")

    @pytest.mark.asyncio
    async def test_requirement(self, db):
        requirement = Requirement(type=RequirementType.SEMHAS, content="1. Surat")

        stored = await repository.save_requirement(db, requirement)

        assert stored == requirement
        assert await repository.get_requirement(db, RequirementType.SEMHAS) == requirement
