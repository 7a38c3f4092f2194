from feedback_app.models.user import User
from feedback_app.models.form import Form
from feedback_app.models.form_response import FormResponse

__all__ = ["User", "Form", "FormResponse"]
