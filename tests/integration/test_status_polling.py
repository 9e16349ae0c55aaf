"""Integration tests for verification status checks."""

import pytest
import responses

from contract_verifier import (
    ExplorerRejectedError,
    VerificationStatus,
    VerificationSubmitter,
    VerificationUnsupportedError,
)
from contract_verifier.types import RetryPolicy


class TestCheckStatus:
    """Test single status queries."""

    @responses.activate
    def test_etherscan_status(self, keyed_profile):
        """Test querying an Etherscan-compatible explorer."""
        responses.add(
            responses.GET,
            "https://api.d.example.com/api",
            json={"status": "1", "message": "OK", "result": "Pass - Verified"},
            status=200,
        )

        status = VerificationSubmitter(timeout=5).check_status(keyed_profile, "abcd")

        assert status is VerificationStatus.VERIFIED
        assert "action=checkverifystatus" in responses.calls[0].request.url
        assert "guid=abcd" in responses.calls[0].request.url

    @responses.activate
    def test_zksync_status(self, rollup_profile):
        """Test querying the zkSync verification API."""
        responses.add(
            responses.GET,
            "https://rollup-b.example.com/contract_verification/42",
            json={"status": "queued"},
            status=200,
        )

        status = VerificationSubmitter(timeout=5).check_status(rollup_profile, "42")

        assert status is VerificationStatus.PENDING

    def test_unsupported_network_raises(self, bare_profile, fake_transport_cls):
        """Test that status checks need an explorer."""
        with pytest.raises(VerificationUnsupportedError):
            VerificationSubmitter(transport=fake_transport_cls()).check_status(bare_profile, "1")

    @responses.activate
    def test_transport_errors_propagate(self, rollup_profile):
        """Test that status check errors are raised to the caller."""
        responses.add(
            responses.GET,
            "https://rollup-b.example.com/contract_verification/42",
            body="not found",
            status=404,
        )

        with pytest.raises(ExplorerRejectedError):
            VerificationSubmitter(timeout=5).check_status(rollup_profile, "42")


class TestWaitForVerification:
    """Test polling until a terminal status."""

    def test_polls_until_verified(self, rollup_profile, fake_transport_cls, fake_sleep, recorded_sleeps):
        """Test that pending answers are polled again."""
        transport = fake_transport_cls(
            {"status": "queued"},
            {"status": "in_progress"},
            {"status": "successful"},
        )
        submitter = VerificationSubmitter(transport=transport, sleep=fake_sleep)

        status = submitter.wait_for_verification(
            rollup_profile, "42", RetryPolicy(max_attempts=5, initial_delay=1, backoff=1)
        )

        assert status is VerificationStatus.VERIFIED
        assert len(transport.calls) == 3
        assert recorded_sleeps == [1, 1]

    def test_stops_on_failure(self, rollup_profile, fake_transport_cls, fake_sleep):
        """Test that a failed verification ends polling."""
        transport = fake_transport_cls({"status": "failed"})
        submitter = VerificationSubmitter(transport=transport, sleep=fake_sleep)

        assert submitter.wait_for_verification(rollup_profile, "42") is VerificationStatus.FAILED
        assert len(transport.calls) == 1

    def test_gives_up_while_pending(self, rollup_profile, fake_transport_cls, fake_sleep):
        """Test that polling is bounded."""
        transport = fake_transport_cls(*[{"status": "queued"}] * 10)
        submitter = VerificationSubmitter(transport=transport, sleep=fake_sleep)

        status = submitter.wait_for_verification(
            rollup_profile, "42", RetryPolicy(max_attempts=3, initial_delay=0)
        )

        assert status is VerificationStatus.PENDING
        assert len(transport.calls) == 3
