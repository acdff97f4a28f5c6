"""Demo forms and submissions loaded into the in-memory store."""
from datetime import datetime, timezone


def _ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


SEED_FORMS = [
    {
        "id": "form-001",
        "title": "Customer Feedback Form",
        "description": "Collect feedback from customers about their experience.",
        "boardId": "demo",
        "workspaceId": "demo",
        "fields": [
            {"id": "field-1", "type": "text", "label": "Full Name", "required": True,
             "placeholder": "Enter your full name"},
            {"id": "field-2", "type": "email", "label": "Email Address", "required": True,
             "placeholder": "you@example.com"},
            {"id": "field-3", "type": "dropdown", "label": "How satisfied are you?", "required": True,
             "options": ["Very Satisfied", "Satisfied", "Neutral", "Dissatisfied", "Very Dissatisfied"]},
            {"id": "field-4", "type": "long_text", "label": "Additional Comments", "required": False,
             "placeholder": "Tell us more..."},
            {"id": "field-5", "type": "long_text", "label": "What went wrong?", "required": True,
             "logic": {
                 "conditions": [{"fieldId": "field-3", "operator": "contains", "value": "Dissatisfied"}],
                 "action": "show",
             }},
        ],
        "settings": {
            "allowUpdate": False,
            "allowSubItems": False,
            "prefillEnabled": False,
            "customTheme": {"primaryColor": "#0073ea", "backgroundColor": "#f0f4ff",
                            "fontFamily": "Roboto, sans-serif"},
            "successMessage": "Thank you for your feedback! We appreciate it.",
        },
        "submissionCount": 3,
        "isActive": True,
        "createdAt": _ts("2025-01-10T10:00:00"),
        "updatedAt": _ts("2025-01-10T10:00:00"),
    },
    {
        "id": "form-002",
        "title": "Bug Report Form",
        "description": "Report bugs and issues with the product.",
        "boardId": "demo",
        "workspaceId": "demo",
        "fields": [
            {"id": "field-1", "type": "text", "label": "Bug Title", "required": True,
             "placeholder": "Short description of the bug"},
            {"id": "field-2", "type": "dropdown", "label": "Severity", "required": True,
             "options": ["Critical", "High", "Medium", "Low"]},
            {"id": "field-3", "type": "long_text", "label": "Steps to Reproduce", "required": True,
             "placeholder": "1. Go to...\n2. Click on..."},
            {"id": "field-4", "type": "text", "label": "Expected Behavior", "required": False,
             "placeholder": "What should have happened?"},
        ],
        "settings": {
            "allowUpdate": True,
            "allowSubItems": False,
            "prefillEnabled": False,
            "customTheme": {"primaryColor": "#e2445c", "backgroundColor": "#fff5f5",
                            "fontFamily": "Roboto, sans-serif"},
            "successMessage": "Bug reported! Our team will look into it.",
        },
        "submissionCount": 1,
        "isActive": True,
        "createdAt": _ts("2025-01-15T09:00:00"),
        "updatedAt": _ts("2025-01-15T09:00:00"),
    },
    {
        "id": "form-003",
        "title": "New Employee Onboarding",
        "description": "Collect information for new employee setup.",
        "boardId": "demo",
        "workspaceId": "demo",
        "fields": [
            {"id": "field-1", "type": "text", "label": "Full Name", "required": True,
             "placeholder": "First and last name"},
            {"id": "field-2", "type": "email", "label": "Work Email", "required": True,
             "placeholder": "name@company.com"},
            {"id": "field-3", "type": "text", "label": "Department", "required": True,
             "placeholder": "e.g. Engineering"},
            {"id": "field-4", "type": "date", "label": "Start Date", "required": True},
            {"id": "field-5", "type": "phone", "label": "Phone Number", "required": False,
             "placeholder": "+1 (555) 000-0000"},
        ],
        "settings": {
            "allowUpdate": False,
            "allowSubItems": True,
            "prefillEnabled": True,
            "customTheme": {"primaryColor": "#00c875", "backgroundColor": "#f0fff8",
                            "fontFamily": "Roboto, sans-serif"},
            "successMessage": "Welcome aboard! Your information has been received.",
        },
        "submissionCount": 0,
        "isActive": True,
        "createdAt": _ts("2025-02-01T08:00:00"),
        "updatedAt": _ts("2025-02-01T08:00:00"),
    },
]

SEED_SUBMISSIONS = [
    {
        "id": "sub-001",
        "formId": "form-001",
        "boardId": "demo",
        "data": {
            "field-1": "Alice Johnson",
            "field-2": "alice@example.com",
            "field-3": "Very Satisfied",
            "field-4": "Great product, really love the UI!",
        },
        "isUpdate": False,
        "submittedAt": _ts("2025-01-11T14:23:00"),
    },
    {
        "id": "sub-002",
        "formId": "form-001",
        "boardId": "demo",
        "data": {
            "field-1": "Bob Smith",
            "field-2": "bob@example.com",
            "field-3": "Satisfied",
            "field-4": "Works well, but could use some speed improvements.",
        },
        "isUpdate": False,
        "submittedAt": _ts("2025-01-12T09:10:00"),
    },
    {
        "id": "sub-003",
        "formId": "form-001",
        "boardId": "demo",
        "data": {
            "field-1": "Carol White",
            "field-2": "carol@example.com",
            "field-3": "Neutral",
            "field-4": "",
        },
        "isUpdate": False,
        "submittedAt": _ts("2025-01-13T16:45:00"),
    },
    {
        "id": "sub-004",
        "formId": "form-002",
        "boardId": "demo",
        "data": {
            "field-1": "Login button not working on Safari",
            "field-2": "High",
            "field-3": "1. Open Safari\n2. Navigate to login page\n3. Click 'Sign In'",
            "field-4": "User should be logged in successfully",
        },
        "isUpdate": False,
        "submittedAt": _ts("2025-01-16T11:00:00"),
    },
]
