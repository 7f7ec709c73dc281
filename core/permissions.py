# ============================================
# CENTRALIZED ROLE → PERMISSIONS MAP
# ============================================
# Static tables. Permissions are "<entity>:<action>" and never depend on
# which record is touched: a manager editing a unit may edit any unit.

# =====================================================
# VIEW ACCESS: every view has an explicit entry
# =====================================================
VIEW_ACCESS = {
    # Staff only
    "dashboard": ["admin", "manager"],
    "buildings": ["admin", "manager"],
    "units": ["admin", "manager"],
    "people": ["admin", "manager"],

    # Everyone signed in
    "tickets": ["admin", "manager", "user"],
    "communications": ["admin", "manager", "user"],
    "documents": ["admin", "manager", "user"],
    "agenda": ["admin", "manager", "user"],
    "profile": ["admin", "manager", "user"],
}


ROLE_PERMISSIONS = {

    # =====================================================
    # ADMIN: full access
    # =====================================================
    "admin": [
        "buildings:create", "buildings:edit", "buildings:delete",
        "buildings:export", "buildings:import",

        "units:create", "units:edit", "units:delete",
        "units:export", "units:import",

        "people:create", "people:edit", "people:delete",
        "people:export", "people:import",

        "tickets:create", "tickets:edit", "tickets:delete",
        "tickets:manage_status", "tickets:analyze",
        "tickets:export",

        "documents:create", "documents:delete",

        "events:create", "events:edit", "events:delete",

        "communications:create", "communications:edit", "communications:delete",
        "communications:draft",
    ],

    # =====================================================
    # MANAGER: cannot create/edit buildings, cannot delete people/tickets
    # =====================================================
    "manager": [
        "buildings:export",

        "units:create", "units:edit",
        "units:export", "units:import",

        "people:create", "people:edit",
        "people:export", "people:import",

        "tickets:create", "tickets:edit",
        "tickets:manage_status", "tickets:analyze",
        "tickets:export",

        "documents:create",

        "events:create", "events:edit",

        "communications:create", "communications:edit",
        "communications:draft",
    ],

    # =====================================================
    # USER: owners and tenants
    # =====================================================
    "user": [
        "tickets:create",
    ],
}

# Roles outside the table resolve to this one
FALLBACK_ROLE = "user"
