"""
Document Fields

Builds the placeholder values for the defense invitation document and
formats dates the way official letters write them.
"""

from collections.abc import Iterable
from datetime import date

from sat_portal.modules.store.schemas import Lecturer, ThesisDefense, ThesisRegistration

# Indexed by date.weekday(): Monday is 0
DAY_NAMES = ("Senin", "Selasa", "Rabu", "Kamis", "Jumat", "Sabtu", "Minggu")

MONTH_NAMES = (
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
)

PLACEHOLDERS = (
    "no_surat",
    "nama",
    "nim",
    "judul",
    "hari",
    "tgl",
    "waktu",
    "ruang",
    "dosen1",
    "dosen2",
    "dosen3",
    "dosen4",
)


def format_date_indo(value: date | None) -> tuple[str, str]:
    """
    Indonesian day name and long date.

    >>> format_date_indo(date(2024, 6, 20))
    ('Kamis', '20 Juni 2024')
    """
    if value is None:
        return "-", "-"
    return DAY_NAMES[value.weekday()], f"{value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def format_lecturer(lecturer: Lecturer | None) -> str:
    if lecturer is None:
        return "-"
    return f"{lecturer.name} (NIP: {lecturer.nip})"


def build_defense_fields(
    defense: ThesisDefense,
    letter_number: str | None,
    student_identifier: str | None,
    proposal: ThesisRegistration | None,
    lecturers: Iterable[Lecturer],
) -> dict[str, str]:
    """
    Placeholder values for a scheduled defense.

    dosen1 and dosen2 are the proposal's advisors, dosen3 and dosen4 the
    defense examiners.
    """
    by_id = {lecturer.id: lecturer for lecturer in lecturers}

    def lecturer(lecturer_id: str | None) -> str:
        return format_lecturer(by_id.get(lecturer_id)) if lecturer_id else "-"

    hari, tgl = format_date_indo(defense.defense_date)
    return {
        "no_surat": letter_number or "-",
        "nama": defense.student_name or "-",
        "nim": student_identifier or "-",
        "judul": (proposal.title if proposal else "") or "-",
        "hari": hari,
        "tgl": tgl,
        "waktu": f"{defense.defense_time:%H:%M} WIB" if defense.defense_time else "-",
        "ruang": defense.defense_room or "-",
        "dosen1": lecturer(proposal.advisor1_id if proposal else None),
        "dosen2": lecturer(proposal.advisor2_id if proposal else None),
        "dosen3": lecturer(defense.examiner1_id),
        "dosen4": lecturer(defense.examiner2_id),
    }
