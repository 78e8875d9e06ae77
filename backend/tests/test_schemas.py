"""
Tests for brief and deployment request schemas.
"""
import json

import pytest
from pydantic import ValidationError

from sitelaunch.schemas.briefs import BriefIn
from sitelaunch.schemas.deployments import DeployRequest, JobView, SiteArtifact

from tests.fixtures.doubles import SAMPLE_BRIEF


class TestBriefIn:

    def test_sanitizes_fields(self):
        """Fields are trimmed and lowercased where needed."""
        brief = BriefIn.model_validate({
            **SAMPLE_BRIEF,
            "name": "  Acme  ",
            "email": " A@B.COM ",
            "pageType": " Landing ",
        })
        assert brief.name == "Acme"
        assert brief.email == "a@b.com"
        assert brief.page_type.value == "landing"
        assert brief.colors == {}
        assert brief.products == []

    @pytest.mark.parametrize("field", ["name", "email", "industry", "pageType", "description"])
    def test_required_fields(self, field):
        """Each required field is enforced."""
        data = dict(SAMPLE_BRIEF)
        data.pop(field)
        with pytest.raises(ValidationError):
            BriefIn.model_validate(data)

    @pytest.mark.parametrize("field", ["name", "industry"])
    def test_blank_after_trim_rejected(self, field):
        """Whitespace-only values are rejected."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, field: "   "})

    @pytest.mark.parametrize("email", ["not-an-email", "a@b", "a b@c.com"])
    def test_invalid_email(self, email):
        """Malformed emails are rejected."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "email": email})

    def test_unknown_page_type(self):
        """Page types outside the enum are rejected."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "pageType": "wiki"})

    def test_description_bounds(self):
        """Descriptions must be 10 to 5000 characters."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "description": "too short"})
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "description": "x" * 5001})
        assert BriefIn.model_validate({**SAMPLE_BRIEF, "description": "x" * 5000})

    def test_name_length_limit(self):
        """Names over 255 characters are rejected."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "name": "n" * 256})

    def test_colors_must_be_strings(self):
        """Color values must be strings."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "colors": {"primary": 5}})

    def test_products_must_be_objects(self):
        """Products must be objects."""
        with pytest.raises(ValidationError):
            BriefIn.model_validate({**SAMPLE_BRIEF, "products": ["a", "b"]})

    def test_to_record_uses_snake_case(self):
        """to_record() produces snake_case storage keys."""
        record = BriefIn.model_validate(SAMPLE_BRIEF).to_record()
        assert record["page_type"] == "landing"
        assert "pageType" not in record


class TestDeploymentSchemas:

    def test_deploy_request_defaults(self):
        """An empty deploy request defaults to auto-generation."""
        req = DeployRequest.model_validate({})
        assert req.brief_id is None
        assert req.brief is None
        assert req.auto_generate is True
        assert req.website_code is None

    def test_deploy_request_camel_case(self):
        """Deploy requests accept camelCase keys and blank out null code fields."""
        req = DeployRequest.model_validate({
            "autoGenerate": False,
            "websiteCode": {"html": "<p>x</p>", "css": None},
        })
        assert req.auto_generate is False
        assert req.website_code.html == "<p>x</p>"
        assert req.website_code.css == ""

    def test_artifact_content_check(self):
        """Only non-blank html counts as content."""
        assert SiteArtifact(html="<h1>Hi</h1>").has_content
        assert not SiteArtifact(html="  \n").has_content
        assert not SiteArtifact().has_content

    def test_job_view_decodes_serialized_result(self):
        """A JSON-encoded result is decoded on read."""
        view = JobView.model_validate({
            "id": "6f1c1f7e-6c1f-4a57-9b0b-1b2f6d1e8a11",
            "status": "completed",
            "result": json.dumps({"deployment": {"address": "https://a"}}),
            "created_at": "2026-10-17T00:00:00",
        })
        assert view.result == {"deployment": {"address": "https://a"}}

    def test_job_view_keeps_undecodable_result(self):
        """An undecodable result is returned as stored."""
        view = JobView.model_validate({
            "id": "6f1c1f7e-6c1f-4a57-9b0b-1b2f6d1e8a11",
            "status": "failed",
            "result": "not json",
            "error": "boom",
            "created_at": "2026-10-17T00:00:00",
        })
        assert view.result == "not json"

    def test_job_view_serializes_camel_case(self):
        """Job views serialize with camelCase keys."""
        view = JobView.model_validate({
            "id": "6f1c1f7e-6c1f-4a57-9b0b-1b2f6d1e8a11",
            "status": "processing",
            "created_at": "2026-10-17T00:00:00",
        })
        dumped = view.model_dump(by_alias=True, mode="json")
        assert dumped["jobId"] == "6f1c1f7e-6c1f-4a57-9b0b-1b2f6d1e8a11"
        assert dumped["status"] == "processing"
        assert dumped["briefId"] is None
        assert "createdAt" in dumped
