"""
Unit tests for defense document fields.
"""

from datetime import date, time
from uuid import uuid4

from sat_portal.modules.documents.fields import (
    PLACEHOLDERS,
    build_defense_fields,
    format_date_indo,
    format_lecturer,
)
from sat_portal.modules.store.schemas import Lecturer, ThesisDefense, ThesisRegistration


class TestFormatting:
    """Tests for date and lecturer formatting."""

    def test_format_date_indo(self):
        assert format_date_indo(date(2024, 6, 20)) == ("Kamis", "20 Juni 2024")

    def test_week_boundaries(self):
        assert format_date_indo(date(2024, 6, 17))[0] == "Senin"
        assert format_date_indo(date(2024, 6, 23))[0] == "Minggu"

    def test_no_date(self):
        assert format_date_indo(None) == ("-", "-")

    def test_format_lecturer(self):
        assert format_lecturer(Lecturer(name="Budi", nip="1980")) == "Budi (NIP: 1980)"
        assert format_lecturer(None) == "-"


class TestBuildDefenseFields:
    """Tests for build_defense_fields."""

    def test_all_fields(self):
        advisors = [Lecturer(id=str(uuid4()), name=f"Dosen {i}", nip=str(i)) for i in range(4)]
        proposal = ThesisRegistration(
            id=str(uuid4()),
            student_id=str(uuid4()),
            title="Sistem Informasi Akademik",
            advisor1_id=advisors[0].id,
            advisor2_id=advisors[1].id,
        )
        defense = ThesisDefense(
            student_id=proposal.student_id,
            student_name="Ani",
            defense_date=date(2024, 6, 20),
            defense_time=time(9, 5),
            defense_room="Aula",
            examiner1_id=advisors[2].id,
            examiner2_id=advisors[3].id,
        )

        fields = build_defense_fields(defense, "001/UN/2024", "2010511001", proposal, advisors)

        assert set(fields) == set(PLACEHOLDERS)
        assert fields["no_surat"] == "001/UN/2024"
        assert fields["nim"] == "2010511001"
        assert fields["judul"] == "Sistem Informasi Akademik"
        assert fields["hari"] == "Kamis"
        assert fields["tgl"] == "20 Juni 2024"
        assert fields["waktu"] == "09:05 WIB"
        assert fields["dosen1"] == "Dosen 0 (NIP: 0)"
        assert fields["dosen2"] == "Dosen 1 (NIP: 1)"
        assert fields["dosen3"] == "Dosen 2 (NIP: 2)"
        assert fields["dosen4"] == "Dosen 3 (NIP: 3)"

    def test_unknown_values_are_dashes(self):
        defense = ThesisDefense(student_id=str(uuid4()), examiner1_id=str(uuid4()))

        fields = build_defense_fields(defense, None, None, None, [])

        assert all(value == "-" for value in fields.values())
