"""Tests for campaign templates and simulated sending."""

import logging
import pytest

from workshopmgr.domain.campaign import CLIENT_NAME_PLACEHOLDER, render_template, select_recipients
from workshopmgr.domain.entities import (
    CampaignType,
    CompanyIdentity,
    ContactInfo,
    IndividualIdentity,
    Parent,
    ParentStatus,
)
from workshopmgr.domain.errors import NotFoundError, ValidationError


def _parent(name, status, id):
    return Parent(
        identity=IndividualIdentity(name=name, surname="Verdi"),
        contact=ContactInfo(email=f"{name.lower()}@example.com"),
        status=status,
        id=id,
    )


class TestTemplates:
    def test_render_replaces_every_placeholder(self):
        parent = _parent("Carla", ParentStatus.ACTIVE, "p1")
        template = f"Ciao {CLIENT_NAME_PLACEHOLDER}, {CLIENT_NAME_PLACEHOLDER}!"

        assert render_template(template, parent) == "Ciao Carla Verdi, Carla Verdi!"

    def test_company_uses_company_name(self):
        parent = Parent(
            identity=CompanyIdentity(company_name="Scuola Arcobaleno", vat_number="1"),
            contact=ContactInfo(email="s@example.com"),
        )
        assert render_template("Gentile {NOME_CLIENTE}", parent) == "Gentile Scuola Arcobaleno"

    def test_select_recipients(self):
        parents = [
            _parent("Anna", ParentStatus.ACTIVE, "p1"),
            _parent("Bruno", ParentStatus.PROSPECT, "p2"),
            _parent("Carla", ParentStatus.CEASED, "p3"),
        ]

        assert [p.id for p in select_recipients(parents, [ParentStatus.PROSPECT, ParentStatus.CEASED])] == [
            "p2",
            "p3",
        ]
        assert len(select_recipients(parents, [])) == 3


class TestCampaignService:
    def test_create_and_list(self, campaign_service):
        campaign_service.create_campaign("Zeta", CampaignType.DEVELOPMENT, "S", "B")
        campaign_id = campaign_service.create_campaign(
            "Alfa", CampaignType.REMINDER, "S", "B", [ParentStatus.ACTIVE, ParentStatus.ACTIVE]
        )

        assert [c.name for c in campaign_service.list_campaigns()] == ["Alfa", "Zeta"]
        assert [c.name for c in campaign_service.list_campaigns(CampaignType.REMINDER)] == ["Alfa"]
        assert campaign_service.get_campaign(campaign_id).target_statuses == (ParentStatus.ACTIVE,)

    def test_required_fields(self, campaign_service):
        with pytest.raises(ValidationError) as excinfo:
            campaign_service.create_campaign("", CampaignType.REMINDER, "", "")
        assert len(excinfo.value.messages) == 3

    def test_preview_with_signature(self, campaign_service, company_service, sample_parent):
        company_service.update_profile(
            company_name="Laboratori Creativi", vat_number="0123", address="Via Roma 1", email="info@example.com"
        )
        campaign_id = campaign_service.create_campaign(
            "Rinnovo", CampaignType.REMINDER, "Iscrizioni per {NOME_CLIENTE}", "Ciao {NOME_CLIENTE}"
        )

        (message,) = campaign_service.preview(campaign_id)

        assert message.email == "anna.rossi@example.com"
        assert message.subject == "Iscrizioni per Anna Rossi"
        assert message.body == "Ciao Anna Rossi\n\nLaboratori Creativi"

    def test_preview_for_chosen_clients(self, campaign_service, sample_parent):
        campaign_id = campaign_service.create_campaign(
            "Promo", CampaignType.DEVELOPMENT, "S", "B", [ParentStatus.PROSPECT]
        )

        assert campaign_service.preview(campaign_id) == []
        assert [m.parent_id for m in campaign_service.preview(campaign_id, [sample_parent.id])] == [
            sample_parent.id
        ]
        with pytest.raises(NotFoundError):
            campaign_service.preview(campaign_id, ["missing"])

    def test_send_logs_each_message(self, campaign_service, sample_parent, caplog):
        campaign_id = campaign_service.create_campaign("Rinnovo", CampaignType.REMINDER, "Ciao", "Testo")

        with caplog.at_level(logging.INFO, logger="workshopmgr.domain.campaign"):
            messages = campaign_service.send(campaign_id)

        assert len(messages) == 1
        assert "Simulated send to anna.rossi@example.com" in caplog.text

    def test_send_without_recipients(self, campaign_service, sample_parent):
        campaign_id = campaign_service.create_campaign(
            "Promo", CampaignType.DEVELOPMENT, "S", "B", [ParentStatus.CEASED]
        )

        with pytest.raises(ValidationError, match="no recipients"):
            campaign_service.send(campaign_id)

    def test_update_and_delete(self, campaign_service):
        campaign_id = campaign_service.create_campaign("Promo", CampaignType.DEVELOPMENT, "S", "B")

        campaign_service.update_campaign(campaign_id, target_statuses=[ParentStatus.SUSPENDED])
        assert campaign_service.get_campaign(campaign_id).target_statuses == (ParentStatus.SUSPENDED,)

        campaign_service.delete_campaign(campaign_id)
        with pytest.raises(NotFoundError):
            campaign_service.get_campaign(campaign_id)
