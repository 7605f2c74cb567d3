"""
Schedule Export

CSV export of scheduled defenses for the academic office.
"""

from collections.abc import Callable, Iterable
from datetime import date

from sat_portal.modules.store.schemas import ThesisDefense

CSV_HEADER = (
    "Nama Mahasiswa",
    "Judul Skripsi",
    "SKS",
    "Tanggal Sidang",
    "Waktu",
    "Ruangan",
    "Penguji 1",
    "Penguji 2",
    "Status",
)


def _csv_row(defense: ThesisDefense, lecturer_name: Callable[[str | None], str]) -> str:
    return ",".join(
        [
            f'"{defense.student_name}"',
            '"-"',
            str(defense.sks_count),
            defense.defense_date.isoformat() if defense.defense_date else "-",
            f"{defense.defense_time:%H:%M}" if defense.defense_time else "-",
            defense.defense_room or "-",
            f'"{lecturer_name(defense.examiner1_id)}"',
            f'"{lecturer_name(defense.examiner2_id)}"',
            defense.status.value,
        ]
    )


def export_schedule_csv(
    defenses: Iterable[ThesisDefense],
    lecturer_name: Callable[[str | None], str],
) -> str:
    """
    Render defenses as CSV text, one row per defense, lines joined by "\\n".

    Args:
        defenses: Defenses to export, in output order
        lecturer_name: Resolves an examiner id to a display name ("-" if unknown)
    """
    lines = [",".join(CSV_HEADER)]
    lines.extend(_csv_row(defense, lecturer_name) for defense in defenses)
    return "\n".join(lines)


def export_filename(on: date) -> str:
    return f"Jadwal_Sidang_{on:%d-%m-%Y}.csv"
