import logging

from firebase_admin import get_app, initialize_app

from academy.core.settings import get_settings

logger = logging.getLogger(__name__)


def init_firebase() -> None:
    """Initialize the Firebase Admin SDK once per process.

    Credentials come from GOOGLE_APPLICATION_CREDENTIALS. FIREBASE_PROJECT_ID
    is passed through for setups whose credentials lack a project id, such
    as the Auth emulator.
    """
    try:
        get_app()
    except ValueError:
        project_id = get_settings().firebase_project_id
        options = {"projectId": project_id} if project_id else None
        app = initialize_app(options=options)
        logger.info(
            "Firebase Admin initialized (app=%s, project=%s)", app.name, project_id
        )
