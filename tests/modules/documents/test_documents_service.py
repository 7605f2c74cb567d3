"""
Tests for template management, defense document generation and schedule export.
"""

import io
import threading
from datetime import date, time
from unittest.mock import patch
from uuid import uuid4

import pytest
from docx import Document

from sat_portal.core.exceptions import TemplateError, ValidationError
from sat_portal.modules.documents import service
from sat_portal.modules.store import repository
from sat_portal.modules.store.models import ApplicationStatus
from sat_portal.modules.store.schemas import Lecturer, ThesisDefense, ThesisRegistration
from sat_portal.modules.users.models import UserRole
from sat_portal.modules.users.repository import UserRepository


class TestTemplateUpload:
    """Tests for upload_template."""

    @pytest.mark.asyncio
    async def test_upload_replaces_template(self, db, docx_template):
        await service.upload_template(db, "lama.docx", docx_template)
        await service.upload_template(db, "Undangan.DOCX", docx_template)

        template = await service.get_template(db)

        assert template.name == "Undangan.DOCX"
        assert template.content == docx_template

    @pytest.mark.asyncio
    async def test_wrong_extension(self, db, docx_template):
        with pytest.raises(ValidationError) as exc_info:
            await service.upload_template(db, "undangan.pdf", docx_template)

        assert exc_info.value.message == "Harap upload file .docx"

    @pytest.mark.asyncio
    async def test_corrupt_docx(self, db):
        with pytest.raises(TemplateError):
            await service.upload_template(db, "undangan.docx", b"not a zip")

        assert await service.get_template(db) is None


class TestGenerateDefenseDocument:
    """Tests for generate_defense_document."""

    @pytest.mark.asyncio
    async def test_generate(self, db, docx_template):
        student = await UserRepository.create(
            db,
            email="ani@student.example.ac.id",
            password_hash=None,
            full_name="Ani",
            role=UserRole.STUDENT,
            identifier="2010511001",
        )
        lecturers = [
            (await repository.save_entity(db, Lecturer(name=f"Dosen {i}", nip=str(i)))).entity
            for i in range(4)
        ]
        proposal = (
            await repository.save_entity(
                db,
                ThesisRegistration(
                    student_id=str(student.id),
                    title="Sistem Informasi Akademik",
                    advisor1_id=lecturers[0].id,
                    advisor2_id=lecturers[1].id,
                    status=ApplicationStatus.APPROVED,
                ),
            )
        ).entity
        await service.upload_template(db, "undangan.docx", docx_template)
        defense = ThesisDefense(
            thesis_id=proposal.id,
            student_id=str(student.id),
            student_name="Ani",
            defense_date=date(2024, 6, 20),
            defense_time=time(9, 0),
            defense_room="Aula",
            examiner1_id=lecturers[2].id,
            examiner2_id=lecturers[3].id,
            letter_number="001/UN/2024",
            status=ApplicationStatus.SCHEDULED,
        )

        content = await service.generate_defense_document(db, defense)

        texts = [p.text for p in Document(io.BytesIO(content)).paragraphs]
        assert texts == [
            "Nomor: 001/UN/2024",
            "Kepada Yth. Ani (2010511001)",
            "Judul: Sistem Informasi Akademik",
            "Hari/Tanggal: Kamis, 20 Juni 2024",
            "Waktu: 09:00 WIB di Aula",
            "Pembimbing: Dosen 0 (NIP: 0) dan Dosen 1 (NIP: 1)",
            "Penguji: Dosen 2 (NIP: 2) dan Dosen 3 (NIP: 3)",
        ]

    @pytest.mark.asyncio
    async def test_no_template(self, db):
        defense = ThesisDefense(student_id=str(uuid4()))

        with pytest.raises(TemplateError):
            await service.generate_defense_document(db, defense)

    @pytest.mark.asyncio
    async def test_render_runs_off_the_event_loop(self, db, docx_template):
        await service.upload_template(db, "undangan.docx", docx_template)
        loop_thread = threading.get_ident()
        render_threads = []

        def fake_render(template, fields):
            render_threads.append(threading.get_ident())
            return b"rendered"

        with patch.object(service.renderer, "render", new=fake_render):
            document = await service.generate_defense_document(
                db, ThesisDefense(student_id=str(uuid4()))
            )

        assert document == b"rendered"
        assert render_threads and render_threads[0] != loop_thread


class TestExportSchedule:
    """Tests for export_schedule."""

    @pytest.mark.asyncio
    async def test_export_scheduled_only(self, db):
        examiner = (await repository.save_entity(db, Lecturer(name="Dr. Citra", nip="3"))).entity
        await repository.save_entity(
            db,
            ThesisDefense(
                student_id=str(uuid4()),
                student_name="Ani",
                sks_count=140,
                defense_date=date(2024, 6, 20),
                examiner1_id=examiner.id,
                status=ApplicationStatus.SCHEDULED,
            ),
        )
        await repository.save_entity(
            db,
            ThesisDefense(
                student_id=str(uuid4()),
                student_name="Budi",
                status=ApplicationStatus.SUBMITTED,
            ),
        )

        filename, csv = await service.export_schedule(db, today=date(2024, 6, 1))

        lines = csv.split("\n")
        assert filename == "Jadwal_Sidang_01-06-2024.csv"
        assert len(lines) == 2
        assert lines[1].startswith('"Ani","-",140,2024-06-20,-,-,"Dr. Citra","-",')
