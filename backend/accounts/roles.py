"""Official role names, as stored in ``accounts.Role.name``.

Always import role names from here instead of hardcoding them.
"""
KETUA_DEPARTEMEN = 'Ketua Departemen'
SEKRETARIS_DEPARTEMEN = 'Sekretaris Departemen'
PEMBIMBING_1 = 'Pembimbing 1'
PEMBIMBING_2 = 'Pembimbing 2'
ADMIN = 'Admin'
PENGUJI = 'Penguji'
MAHASISWA = 'Mahasiswa'
GKM = 'GKM'

SUPERVISOR_ROLES = (PEMBIMBING_1, PEMBIMBING_2)
EXAMINER_ROLES = (PENGUJI,)
DEPARTMENT_ROLES = (KETUA_DEPARTEMEN, SEKRETARIS_DEPARTEMEN, GKM)

# Non-student roles that imply a lecturer account
LECTURER_ROLES = (
    PEMBIMBING_1,
    PEMBIMBING_2,
    PENGUJI,
    KETUA_DEPARTEMEN,
    SEKRETARIS_DEPARTEMEN,
    GKM,
)


def normalize(role_name) -> str:
    return str(role_name or '').strip().lower()


def is_lecturer_role(role_name) -> bool:
    name = normalize(role_name)
    return any(normalize(r) == name for r in LECTURER_ROLES)
