"""Marketing and reminder campaigns.

Messages are rendered from a campaign template and handed to the log; there
is no mail transport, so sending only records what would have been sent.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from workshopmgr.database.base import Database
from workshopmgr.domain.entities import (
    Campaign,
    CampaignType,
    Collection,
    Parent,
    ParentStatus,
)
from workshopmgr.domain.errors import NotFoundError, ValidationError, record_not_found
from workshopmgr.domain.validation import FieldErrors

logger = logging.getLogger(__name__)

CLIENT_NAME_PLACEHOLDER = "{NOME_CLIENTE}"


@dataclass(frozen=True)
class Message:
    parent_id: str
    email: str
    subject: str
    body: str


def render_template(template: str, parent: Parent) -> str:
    """Replace the client name placeholder with the client's display name."""
    return template.replace(CLIENT_NAME_PLACEHOLDER, parent.display_name)


def select_recipients(
    parents: Sequence[Parent], target_statuses: Sequence[ParentStatus]
) -> list[Parent]:
    """Clients whose status is targeted; every client when no status is set."""
    return [
        parent
        for parent in parents
        if not target_statuses or parent.status in target_statuses
    ]


class CampaignService:
    """Service for campaign templates and simulated delivery."""

    def __init__(self, db: Database):
        """Initialize campaign service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_campaign(
        self,
        name: str,
        campaign_type: CampaignType,
        subject: str,
        body: str,
        target_statuses: Sequence[ParentStatus] = (),
    ) -> str:
        """Create a campaign template.

        Returns:
            Campaign ID

        Raises:
            ValidationError: If name, subject or body is empty
        """
        errors = FieldErrors()
        errors.require("name", name, "Name")
        errors.require("subject", subject, "Subject")
        errors.require("body", body, "Body")
        errors.raise_if_any()

        return self.db.add_record(
            Collection.CAMPAIGNS,
            Campaign(
                name=name.strip(),
                campaign_type=campaign_type,
                subject=subject,
                body=body,
                target_statuses=tuple(dict.fromkeys(target_statuses)),
            ),
        )

    def get_campaign(self, campaign_id: str) -> Campaign:
        """Get campaign by ID.

        Raises:
            NotFoundError: If the campaign doesn't exist
        """
        campaign = self.db.get_record(Collection.CAMPAIGNS, campaign_id)
        if campaign is None:
            raise NotFoundError(record_not_found("Campaign", campaign_id))
        return campaign

    def list_campaigns(self, campaign_type: Optional[CampaignType] = None) -> list[Campaign]:
        campaigns = [
            campaign
            for campaign in self.db.list_records(Collection.CAMPAIGNS)
            if campaign_type is None or campaign.campaign_type == campaign_type
        ]
        return sorted(campaigns, key=lambda campaign: campaign.name.lower())

    def update_campaign(self, campaign_id: str, **changes: Any) -> None:
        self.get_campaign(campaign_id)
        if "target_statuses" in changes:
            changes["target_statuses"] = tuple(changes["target_statuses"])
        self.db.update_record(Collection.CAMPAIGNS, campaign_id, changes)

    def delete_campaign(self, campaign_id: str) -> None:
        self.get_campaign(campaign_id)
        self.db.remove_record(Collection.CAMPAIGNS, campaign_id)

    def recipients(self, campaign_id: str) -> list[Parent]:
        """Clients the campaign targets."""
        campaign = self.get_campaign(campaign_id)
        return select_recipients(
            self.db.list_records(Collection.PARENTS), campaign.target_statuses
        )

    def preview(
        self, campaign_id: str, parent_ids: Optional[Sequence[str]] = None
    ) -> list[Message]:
        """Render the campaign for its recipients, or for chosen clients.

        Raises:
            NotFoundError: If the campaign or a chosen client doesn't exist
        """
        campaign = self.get_campaign(campaign_id)
        if parent_ids is None:
            parents = self.recipients(campaign_id)
        else:
            parents = []
            for parent_id in parent_ids:
                parent = self.db.get_record(Collection.PARENTS, parent_id)
                if parent is None:
                    raise NotFoundError(record_not_found("Client", parent_id))
                parents.append(parent)

        profile = self.db.get_company_profile()
        signature = f"\n\n{profile.company_name}" if profile and profile.company_name else ""
        return [
            Message(
                parent_id=parent.id,
                email=parent.contact.email,
                subject=render_template(campaign.subject, parent),
                body=render_template(campaign.body, parent) + signature,
            )
            for parent in parents
        ]

    def send(self, campaign_id: str, parent_ids: Optional[Sequence[str]] = None) -> list[Message]:
        """Simulate sending a campaign by logging every message.

        Returns:
            The messages that were "sent"

        Raises:
            ValidationError: If there is nobody to send to
        """
        messages = self.preview(campaign_id, parent_ids)
        if not messages:
            raise ValidationError("The campaign has no recipients")
        for message in messages:
            logger.info("Simulated send to %s: %s", message.email, message.subject)
        logger.info("Campaign %s sent to %d recipient(s)", campaign_id, len(messages))
        return messages
