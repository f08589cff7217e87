"""
Legacy study slots stored as Cognito custom attributes.

Before study blocks had their own table, sign-up saved up to five time
ranges as ``custom:firstSlotStart`` / ``custom:firstSlotEnd`` ... pairs on
the Cognito user. These carry no weekday either.
"""

import logging
from typing import Any, Dict, List, Mapping

from botocore.exceptions import BotoCoreError, ClientError  # type: ignore

from core.constants import LEGACY_SLOT_ATTRIBUTE_PAIRS
from services.study_block_store import StorageError

logger = logging.getLogger(__name__)


def extract_legacy_slots(attributes: Mapping[str, str]) -> List[Dict[str, str]]:
    """
    Extract raw {start, end} slots from legacy custom attributes.

    Pairs are read in order (first..fifth); a pair with a missing or empty
    half is skipped. Values are returned unvalidated.
    """
    slots: List[Dict[str, str]] = []
    for start_key, end_key in LEGACY_SLOT_ATTRIBUTE_PAIRS:
        start = attributes.get(start_key)
        end = attributes.get(end_key)
        if start and end:
            slots.append({"start": start, "end": end})
    return slots


class CognitoAttributeSource:
    """
    Reads a user's attributes from a Cognito user pool.

    The boto3 ``cognito-idp`` client is created and owned by the caller,
    e.g. ``boto3.client("cognito-idp", region_name=AWS_REGION)``.
    """

    def __init__(self, client: Any, user_pool_id: str):
        self.client = client
        self.user_pool_id = user_pool_id

    def fetch_attributes(self, username: str) -> Dict[str, str]:
        """
        Fetch all attributes of ``username`` as a name -> value dict.

        Raises:
            StorageError: If the Cognito call fails
        """
        try:
            response = self.client.admin_get_user(
                UserPoolId=self.user_pool_id,
                Username=username,
            )
        except (ClientError, BotoCoreError) as e:
            logger.exception(f"Failed to fetch Cognito attributes for {username}: {e}")
            raise StorageError(str(e)) from e

        return {
            attribute["Name"]: attribute.get("Value", "")
            for attribute in response.get("UserAttributes", [])
        }

    def fetch_legacy_slots(self, username: str) -> List[Dict[str, str]]:
        """Fetch and extract the legacy slot pairs of ``username``."""
        return extract_legacy_slots(self.fetch_attributes(username))
