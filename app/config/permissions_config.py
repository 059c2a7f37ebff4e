"""
Permissions and Roles Configuration
This config defines the permission matrix for every module and the two committee roles.
Used by the policy layer, the /auth/me endpoint and the seed script.
"""

# Define modules and their actions
MODULES = {
    "profiles": {
        "resource": "profiles",
        "actions": ["read", "read_all", "create", "update", "update_self", "delete"],
        "description": "Committee member profiles"
    },
    "committees": {
        "resource": "committees",
        "actions": ["read", "create", "update", "delete"],
        "description": "Committee (tenant) records"
    },
    "weeks": {
        "resource": "weeks",
        "actions": ["read", "create", "update", "delete"],
        "description": "Weekly curriculum content"
    },
    "projects": {
        "resource": "projects",
        "actions": ["read", "read_all", "create", "update", "submit", "delete"],
        "description": "Project assignments"
    },
    "attendance": {
        "resource": "attendance",
        "actions": ["read", "read_all", "create", "update", "delete"],
        "description": "Attendance records"
    },
    "announcements": {
        "resource": "announcements",
        "actions": ["read", "create", "update", "delete"],
        "description": "Committee announcements"
    },
    "feedback": {
        "resource": "feedback",
        "actions": ["read", "read_all", "create", "update", "delete"],
        "description": "Mentor feedback"
    },
    "dashboard": {
        "resource": "dashboard",
        "actions": ["read", "report"],
        "description": "Dashboard summaries"
    }
}

# Role definitions. ADMIN gets every action of every module; MEMBER only what is listed.
ROLE_TYPES = {
    "ADMIN": {
        "permissions": None,
        "description": "Committee administrator"
    },
    "MEMBER": {
        "permissions": {
            "profiles": ["read", "update_self"],
            "committees": ["read"],
            "weeks": ["read"],
            "projects": ["read", "submit"],
            "attendance": ["read"],
            "announcements": ["read"],
            "feedback": ["read"],
            "dashboard": ["read"],
        },
        "description": "Committee member with read access to own records"
    }
}

# Descriptions for actions that are not plain CRUD
MODULE_SPECIFIC_PERMISSIONS = {
    "profiles": {
        "read": "Read own profile",
        "read_all": "Read every profile in the committee",
        "update_self": "Update own name and avatar"
    },
    "projects": {
        "read": "Read projects assigned to self",
        "read_all": "Read every project in the committee",
        "submit": "Update status and submission URL of a project assigned to self"
    },
    "attendance": {
        "read": "Read own attendance",
        "read_all": "Read attendance of every member in the committee"
    },
    "feedback": {
        "read": "Read feedback addressed to self",
        "read_all": "Read all feedback in the committee"
    },
    "dashboard": {
        "report": "Committee-wide attendance report"
    }
}


# Generate permission matrix
def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the permissions held by each role
    Format: {
        "permissions": [
            {"name": "weeks:create", "resource": "weeks", "action": "create", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "admin", "description": "...", "permissions": ["announcements:create", ...]},
            ...
        ]
    }
    """
    permissions = []
    roles = []

    for module_name, module_config in MODULES.items():
        resource = module_config["resource"]

        for action in module_config["actions"]:
            description = f"{action.capitalize()} {resource}"
            if module_name in MODULE_SPECIFIC_PERMISSIONS and action in MODULE_SPECIFIC_PERMISSIONS[module_name]:
                description = MODULE_SPECIFIC_PERMISSIONS[module_name][action]

            permissions.append({
                "name": f"{resource}:{action}",
                "resource": resource,
                "action": action,
                "description": description
            })

    for role_type, role_config in ROLE_TYPES.items():
        role_permissions = []
        for module_name, module_config in MODULES.items():
            resource = module_config["resource"]
            if role_config["permissions"] is None:
                allowed = module_config["actions"]
            else:
                allowed = role_config["permissions"].get(module_name, [])
            for action in allowed:
                if action in module_config["actions"]:
                    role_permissions.append(f"{resource}:{action}")

        roles.append({
            "name": role_type.lower(),
            "description": role_config["description"],
            "permissions": sorted(role_permissions)
        })

    return {
        "permissions": permissions,
        "roles": roles
    }


PERMISSION_MATRIX = get_permission_matrix()

# role name -> frozenset of permission names, used for every policy decision
ROLE_PERMISSIONS = {
    role["name"]: frozenset(role["permissions"]) for role in PERMISSION_MATRIX["roles"]
}
