"""Shareable HTML proposals and anonymous view tracking."""
import logging
import secrets
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from proposal_maker.database.models import Account, Proposal, ProposalView
from proposal_maker.services.geo_lookup import UNKNOWN_LOCATION, lookup_location
from proposal_maker.utils.error_handling import ResourceNotFoundError, ValidationError

logger = logging.getLogger(__name__)

SHARE_TOKEN_BYTES = 8
_MAX_TOKEN_ATTEMPTS = 5


def generate_share_token() -> str:
    return secrets.token_hex(SHARE_TOKEN_BYTES)


def client_ip(forwarded_for: Optional[str], client_host: Optional[str]) -> str:
    """Pick the viewer address: first X-Forwarded-For hop, then the peer."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return client_host or UNKNOWN_LOCATION


def view_count(db: Session, proposal: Proposal) -> int:
    return db.query(func.count(ProposalView.id)).filter(ProposalView.proposal_id == proposal.id).scalar() or 0


class ProposalService:
    """Creates proposals and records views on the public share links."""

    def __init__(self, db: Session, geo_lookup: Optional[Callable[[str], str]] = None):
        self.db = db
        self.geo_lookup = geo_lookup or lookup_location

    def _unused_token(self) -> str:
        for _ in range(_MAX_TOKEN_ATTEMPTS):
            token = generate_share_token()
            exists = self.db.query(Proposal.id).filter(Proposal.share_token == token).first()
            if exists is None:
                return token
            logger.warning("Share token collision, regenerating")
        raise RuntimeError("Could not allocate a unique share token")

    def create_proposal(self, account: Account, name: str, html: str) -> Proposal:
        name = (name or "").strip()
        if not name or not html:
            raise ValidationError("Missing name or html")

        proposal = Proposal(
            name=name,
            html=html,
            share_token=self._unused_token(),
            created_by=account.id,
        )
        self.db.add(proposal)
        self.db.commit()
        self.db.refresh(proposal)
        logger.info(f"Created proposal: {proposal.name} (id={proposal.id})")
        return proposal

    def list_proposals(self, account: Account) -> List[Proposal]:
        return (
            self.db.query(Proposal)
            .filter(Proposal.created_by == account.id)
            .order_by(Proposal.created_at.desc(), Proposal.id.desc())
            .all()
        )

    def get_by_token(self, share_token: str) -> Proposal:
        proposal = self.db.query(Proposal).filter(Proposal.share_token == share_token).first()
        if proposal is None:
            raise ResourceNotFoundError("Proposal not found")
        return proposal

    def record_view(self, share_token: str, ip_address: str) -> Proposal:
        """Append one view event for the proposal behind *share_token*.

        The location lookup is best effort and never prevents the view from
        being recorded. The event is committed before returning.
        """
        proposal = self.get_by_token(share_token)

        try:
            location = self.geo_lookup(ip_address)
        except Exception as e:
            logger.warning(f"Location lookup raised, recording view without location: {e}")
            location = UNKNOWN_LOCATION

        self.db.add(
            ProposalView(
                proposal_id=proposal.id,
                ip_address=ip_address or UNKNOWN_LOCATION,
                location=location or UNKNOWN_LOCATION,
            )
        )
        self.db.commit()
        self.db.refresh(proposal)
        logger.info(f"Recorded view for proposal id={proposal.id}")
        return proposal


def render_shared_html(proposal: Proposal, host: Optional[str]) -> str:
    """Stored HTML with development-server links pointed at the serving host."""
    if not host:
        return proposal.html
    return proposal.html.replace("localhost:3000", host)
