import logging

import requests

from dorothy.exceptions import StorageError

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Minimal client for the Supabase Storage REST API."""

    def __init__(self, settings, session=None, timeout=30):
        self.base_url = f"{settings.SUPABASE_URL}/storage/v1"
        self.bucket = settings.STORAGE_BUCKET
        self.service_key = settings.SUPABASE_SERVICE_ROLE_KEY
        self.session = session or requests.Session()
        self.timeout = timeout

    def upload(self, path, data, content_type):
        url = f"{self.base_url}/object/{self.bucket}/{path}"
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            "Content-Type": content_type,
            "x-upsert": "false",
        }
        try:
            response = self.session.post(
                url, data=data, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise StorageError(str(e)) from e

        if not response.ok:
            raise StorageError(response.text, status=response.status_code)

        return path

    def public_url(self, path):
        return f"{self.base_url}/object/public/{self.bucket}/{path}"
