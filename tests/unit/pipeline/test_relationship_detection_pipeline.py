"""End-to-end tests for RelationshipDetectionPipeline on an in-memory database."""

import asyncio
import time
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from warmpath.core.config import settings
from warmpath.core.exceptions import RelationshipDetectionError
from warmpath.database.models import OrganizationRelationship
from warmpath.pipeline.relationship_detection import RelationshipDetectionPipeline
from warmpath.schemas.relationships import RelationshipType, StrengthLabel
from warmpath.services.matching.edge_builder import RelationshipEdgeBuilder

from factories import AS_OF, seed_contact, seed_organization, seed_relationship


async def edge_set(session):
    result = await session.execute(
        select(
            OrganizationRelationship.organization_id,
            OrganizationRelationship.contact_id,
            OrganizationRelationship.relationship_type,
            OrganizationRelationship.path_strength,
            OrganizationRelationship.path_description,
            OrganizationRelationship.detected_via,
        )
    )
    return {tuple(row) for row in result.all()}


@pytest_asyncio.fixture
async def seeded(db_session):
    sequoia = await seed_organization(db_session, "Sequoia Capital")
    acme = await seed_organization(db_session, "Acme Capital")
    await seed_organization(db_session, "Deleted Ventures", deleted=True)
    await seed_organization(db_session, "LLC")

    jane = await seed_contact(
        db_session, "Jane Doe", "Sequoia Capital", "Partner", AS_OF - timedelta(days=10)
    )
    bob = await seed_contact(
        db_session, "Bob Smith", "Acme Capital LLC", None, AS_OF - timedelta(days=400)
    )
    await seed_contact(db_session, "No Company", None, "Advisor")
    await seed_contact(db_session, "Dan Gone", "Deleted Ventures", "Partner")
    return {"sequoia": sequoia, "acme": acme, "jane": jane, "bob": bob}


class TestRelationshipDetectionPipeline:

    @pytest.mark.asyncio
    async def test_detects_and_stores_expected_edges(self, db_session, seeded):
        pipeline = RelationshipDetectionPipeline(db_session)

        result = await pipeline.run(as_of=AS_OF)

        assert result.contacts_processed == 4
        assert result.contacts_skipped == 1
        assert result.organizations_indexed == 2
        assert result.relationships_detected == 2
        assert result.relationships_stored == 2
        assert result.failed_batches == 0
        assert result.strength_breakdown == {StrengthLabel.STRONG: 1, StrengthLabel.WEAK: 1}

        edges = {
            (org_id, contact_id): (rtype, strength)
            for org_id, contact_id, rtype, strength, _, _ in await edge_set(db_session)
        }
        assert edges == {
            (seeded["sequoia"].id, seeded["jane"].id): (RelationshipType.WORKS_AT.value, 1.0),
            (seeded["acme"].id, seeded["bob"].id): (RelationshipType.INDUSTRY_OVERLAP.value, 0.24),
        }

    @pytest.mark.asyncio
    async def test_rerun_produces_identical_edge_set(self, db_session, seeded):
        pipeline = RelationshipDetectionPipeline(db_session)

        await pipeline.run(as_of=AS_OF)
        first = await edge_set(db_session)
        second_result = await pipeline.run(as_of=AS_OF)
        second = await edge_set(db_session)

        assert second == first
        assert second_result.relationships_replaced == 2
        assert second_result.relationships_stored == 2

    @pytest.mark.asyncio
    async def test_threaded_run_matches_inline_run(self, db_session, seeded):
        await RelationshipDetectionPipeline(db_session).run(as_of=AS_OF)
        inline = await edge_set(db_session)

        threaded_config = settings.detection.model_copy(update={"max_workers": 3})
        await RelationshipDetectionPipeline(db_session, config=threaded_config).run(as_of=AS_OF)

        assert await edge_set(db_session) == inline

    @pytest.mark.asyncio
    async def test_manual_edges_survive_a_run(self, db_session, seeded):
        manual = await seed_relationship(
            db_session, seeded["acme"], seeded["jane"], 0.5,
            relationship_type="knows_decision_maker", detected_via="manual",
        )
        manual_pair = (manual.organization_id, manual.contact_id)

        result = await RelationshipDetectionPipeline(db_session).run(as_of=AS_OF)

        edges = await edge_set(db_session)
        assert any(
            (org_id, contact_id) == manual_pair and via == "manual"
            for org_id, contact_id, _, _, _, via in edges
        )
        assert result.relationships_stored == 2

    @pytest.mark.asyncio
    async def test_stricter_floor_detects_fewer_edges(self, db_session):
        await seed_organization(db_session, "Sequoia Capital Management")
        await seed_contact(db_session, "Jane Doe", "Sequoia Capital", "Partner")

        loose = await RelationshipDetectionPipeline(db_session).run(as_of=AS_OF)
        strict_config = settings.detection.model_copy(update={"similarity_floor": 0.9})
        strict = await RelationshipDetectionPipeline(db_session, config=strict_config).run(as_of=AS_OF)

        assert loose.relationships_detected == 1
        assert strict.relationships_detected == 0
        assert strict.relationships_replaced == 1
        assert await edge_set(db_session) == set()

    @pytest.mark.asyncio
    async def test_empty_database(self, db_session):
        result = await RelationshipDetectionPipeline(db_session).run(as_of=AS_OF)

        assert result.relationships_detected == 0
        assert result.relationships_stored == 0
        assert result.strength_breakdown == {}

    @pytest.mark.asyncio
    async def test_unreadable_inputs_abort_the_run(self, db_session):
        pipeline = RelationshipDetectionPipeline(db_session)

        async def failing_snapshot():
            raise SQLAlchemyError("relation \"organizations\" does not exist")

        pipeline.organization_repo.get_detection_snapshot = failing_snapshot

        with pytest.raises(RelationshipDetectionError):
            await pipeline.run(as_of=AS_OF)

    @pytest.mark.asyncio
    async def test_matching_does_not_block_the_event_loop(self, db_session, seeded, monkeypatch):
        original_build = RelationshipEdgeBuilder.build

        def slow_build(builder, contacts):
            time.sleep(0.5)
            return original_build(builder, contacts)

        monkeypatch.setattr(RelationshipEdgeBuilder, "build", slow_build)
        ticks = []
        finished = asyncio.Event()

        async def ticker():
            while not finished.is_set():
                ticks.append(time.monotonic())
                await asyncio.sleep(0.01)

        task = asyncio.create_task(ticker())
        try:
            result = await RelationshipDetectionPipeline(db_session).run(as_of=AS_OF)
        finally:
            finished.set()
            await task

        gaps = [later - earlier for earlier, later in zip(ticks, ticks[1:])]
        assert result.relationships_stored == 2
        assert len(ticks) > 10
        assert max(gaps) < 0.25
