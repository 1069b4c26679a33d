"""
Firebase service for storing resumes and job matches in Firestore.
"""
from __future__ import annotations

import os
import json
import logging
from typing import List, Dict, Any, Optional, Tuple

import firebase_admin
from firebase_admin import credentials, firestore
from google.api_core.exceptions import AlreadyExists
from google.cloud.firestore_v1.base_query import FieldFilter

from resume_scoring.exceptions import DuplicateJobMatchError
from resume_scoring.schemas import ResumeRecord, JobMatchRecord
from resume_scoring.store import job_match_id, new_resume_record, paginate, utc_now

logger = logging.getLogger(__name__)

RESUMES_COLLECTION = "resumes"
JOB_MATCHES_COLLECTION = "job_matches"


class FirebaseService:
    """Firestore-backed store for resumes and job matches."""

    _app = None

    def __init__(self, db=None):
        """
        Args:
            db: Optional Firestore client; the Admin SDK client is created
                from environment credentials when omitted
        """
        if db is None:
            if FirebaseService._app is None:
                self._initialize_firebase()
            db = firestore.client()
        self._db = db
        logger.info("[Firebase] FirebaseService initialized")

    def _initialize_firebase(self):
        """
        Initialize Firebase Admin SDK with credentials from environment variables.

        Priority:
        1. GOOGLE_APPLICATION_CREDENTIALS_JSON (JSON string directly in env var)
        2. GOOGLE_APPLICATION_CREDENTIALS (file path to JSON file)
        3. FIREBASE_PROJECT_ID (for Application Default Credentials)
        """
        try:
            FirebaseService._app = firebase_admin.get_app()
            logger.info("[Firebase] Firebase already initialized")
            return
        except ValueError:
            pass

        firebase_json = os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")
        service_account_path = os.getenv("GOOGLE_APPLICATION_CREDENTIALS")
        project_id = os.getenv("FIREBASE_PROJECT_ID")

        if firebase_json:
            try:
                cred = credentials.Certificate(json.loads(firebase_json))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid JSON in GOOGLE_APPLICATION_CREDENTIALS_JSON: {e}") from e
            FirebaseService._app = firebase_admin.initialize_app(cred)
            logger.info("[Firebase] Initialized from JSON string")
        elif service_account_path:
            if not os.path.exists(service_account_path):
                raise FileNotFoundError(f"Service account file not found: {service_account_path}")
            FirebaseService._app = firebase_admin.initialize_app(credentials.Certificate(service_account_path))
            logger.info(f"[Firebase] Initialized from file {service_account_path}")
        elif project_id:
            FirebaseService._app = firebase_admin.initialize_app(options={"projectId": project_id})
            logger.info(f"[Firebase] Initialized with project ID {project_id}")
        else:
            raise ValueError(
                "No Firebase credentials found. Please set one of:\n"
                "  - GOOGLE_APPLICATION_CREDENTIALS_JSON (JSON string)\n"
                "  - GOOGLE_APPLICATION_CREDENTIALS (file path)\n"
                "  - FIREBASE_PROJECT_ID (for Application Default Credentials)"
            )

    def _resumes(self):
        return self._db.collection(RESUMES_COLLECTION)

    def _matches(self):
        return self._db.collection(JOB_MATCHES_COLLECTION)

    @staticmethod
    def _to_document(record) -> Dict[str, Any]:
        return record.model_dump(mode="json")

    def create_resume(self, user_id: str, extracted_text: str, filename: str = None) -> ResumeRecord:
        record = new_resume_record(user_id, extracted_text, filename)
        self._resumes().document(record.id).set(self._to_document(record))
        logger.info(f"[Firebase] Stored resume {record.id} for user {user_id}")
        return record

    def get_resume(self, resume_id: str) -> Optional[ResumeRecord]:
        try:
            snapshot = self._resumes().document(resume_id).get()
        except Exception as e:
            raise RuntimeError(f"Failed to fetch resume {resume_id}: {e}") from e
        if not snapshot.exists:
            return None
        return ResumeRecord.model_validate(snapshot.to_dict())

    def save_resume(self, record: ResumeRecord) -> ResumeRecord:
        """Replace the stored resume document wholesale."""
        record = record.model_copy(update={"updated_at": utc_now()})
        self._resumes().document(record.id).set(self._to_document(record))
        return record

    def list_resumes(self, user_id: str, page: int = 1, limit: int = 10) -> Tuple[List[ResumeRecord], int]:
        try:
            docs = self._resumes().where(filter=FieldFilter("user_id", "==", user_id)).stream()
            records = [ResumeRecord.model_validate(doc.to_dict()) for doc in docs]
        except Exception as e:
            raise RuntimeError(f"Failed to fetch resumes for user {user_id}: {e}") from e
        return paginate(records, page, limit)

    def delete_resume(self, resume_id: str) -> bool:
        resume_ref = self._resumes().document(resume_id)
        if not resume_ref.get().exists:
            return False
        for doc in self._matches().where(filter=FieldFilter("resume_id", "==", resume_id)).stream():
            doc.reference.delete()
        resume_ref.delete()
        return True

    def get_job_match(self, resume_id: str, job_description_hash: str) -> Optional[JobMatchRecord]:
        snapshot = self._matches().document(job_match_id(resume_id, job_description_hash)).get()
        if not snapshot.exists:
            return None
        return JobMatchRecord.model_validate(snapshot.to_dict())

    def create_job_match(self, record: JobMatchRecord) -> JobMatchRecord:
        """
        Insert a job match document.

        The document ID is the idempotency key, so Firestore's create()
        rejects a second writer with AlreadyExists.
        """
        try:
            self._matches().document(record.id).create(self._to_document(record))
        except AlreadyExists as e:
            raise DuplicateJobMatchError(record.id) from e
        logger.info(f"[Firebase] Stored job match {record.id}")
        return record

    def list_job_matches(self, resume_id: str, page: int = 1, limit: int = 10) -> Tuple[List[JobMatchRecord], int]:
        docs = self._matches().where(filter=FieldFilter("resume_id", "==", resume_id)).stream()
        records = [JobMatchRecord.model_validate(doc.to_dict()) for doc in docs]
        return paginate(records, page, limit)


# Global instance
_firebase_service: Optional[FirebaseService] = None


def get_firebase_service() -> FirebaseService:
    """Get or create the Firebase service instance."""
    global _firebase_service
    if _firebase_service is None:
        _firebase_service = FirebaseService()
    return _firebase_service
