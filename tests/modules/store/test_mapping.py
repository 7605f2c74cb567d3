"""
Unit tests for the entity <-> row mapping tables.
"""

from uuid import UUID, uuid4

import pytest

from sat_portal.modules.store.mapping import (
    ALL_MAPPINGS,
    DEFENSE,
    SEMINAR,
    THESIS,
    mapping_for,
)
from sat_portal.modules.store.models import ApplicationStatus, SeminarType
from sat_portal.modules.store.schemas import (
    Lecturer,
    PendingFile,
    SeminarRegistration,
    StoredFile,
    ThesisDefense,
    ThesisRegistration,
)


class TestMappingTables:
    """Every entity field is persisted somewhere."""

    @pytest.mark.parametrize("mapping", ALL_MAPPINGS, ids=lambda m: m.kind)
    def test_mapping_is_total(self, mapping):
        assert mapping.uncovered_fields() == set()

    @pytest.mark.parametrize("mapping", ALL_MAPPINGS, ids=lambda m: m.kind)
    def test_store_fields_are_columns(self, mapping):
        columns = {column.name for column in mapping.model.__table__.columns}
        assert {fm.store_field for fm in mapping.fields} <= columns

    def test_file_fields(self):
        assert [fm.app_field for fm in SEMINAR.file_fields] == ["file_report"]
        assert [fm.store_field for fm in DEFENSE.file_fields] == [
            "file_fixed_url",
            "file_plagiarism_url",
            "file_transcript_url",
        ]


class TestMappingLookup:
    """Tests for mapping_for."""

    def test_by_kind(self):
        assert mapping_for("thesis") is THESIS

    def test_by_class_and_instance(self):
        lecturer = Lecturer(name="Budi", nip="123")
        assert mapping_for(Lecturer) is mapping_for(lecturer)

    def test_unknown_kind(self):
        with pytest.raises(KeyError):
            mapping_for("course")


class TestConversion:
    """Tests for to_row / from_row."""

    def test_to_row_converts_ids_and_status(self):
        student_id = str(uuid4())
        proposal = ThesisRegistration(
            student_id=student_id,
            title="Judul",
            advisor1_id="",
            status=ApplicationStatus.SUBMITTED,
        )

        row = THESIS.to_row(proposal, exclude={"id"})

        assert "id" not in row
        assert row["student_id"] == UUID(student_id)
        assert row["advisor1_id"] is None
        assert row["status"] == "Diajukan"

    def test_stored_file_becomes_url(self):
        seminar = SeminarRegistration(
            type=SeminarType.HASIL,
            student_id=str(uuid4()),
            file_report=StoredFile(url="https://files.example.test/a.pdf"),
        )

        row = SEMINAR.to_row(seminar, exclude={"id"})

        assert row["file_report_url"] == "https://files.example.test/a.pdf"
        assert row["type"] == "HASIL"

    def test_pending_file_cannot_be_stored(self):
        seminar = SeminarRegistration(
            type=SeminarType.PROPOSAL,
            student_id=str(uuid4()),
            file_report=PendingFile(filename="a.pdf", content=b"x"),
        )

        with pytest.raises(ValueError):
            SEMINAR.to_row(seminar, exclude={"id"})

    def test_from_row_restores_entity(self):
        row = DEFENSE.model(
            id=uuid4(),
            student_id=uuid4(),
            student_name="Ani",
            file_fixed_url="https://files.example.test/f.pdf",
            file_plagiarism_url=None,
            file_transcript_url=None,
            sks_count=140,
            admin_requirements_met=True,
            status="Dijadwalkan",
        )

        defense = DEFENSE.from_row(row)

        assert isinstance(defense, ThesisDefense)
        assert defense.id == str(row.id)
        assert defense.file_fixed == StoredFile(url="https://files.example.test/f.pdf")
        assert defense.file_plagiarism is None
        assert defense.status == ApplicationStatus.SCHEDULED
