"""Helpers for creating rows in the test database."""

from proposal_maker.core.encryption import encrypt_data
from proposal_maker.core.security import hash_password
from proposal_maker.database.models import Account, DesignLibrary, PromptTemplate, Proposal

TEST_API_KEY = "gsk_test_0123456789abcdef"

DECK_TEMPLATE_BODY = "Summarise into slides:\n{text}\nReturn JSON only."


def create_account(db_session, email="owner@example.com", name="Owner", password="secret123", api_key=None) -> Account:
    account = Account(
        email=email,
        name=name,
        password_hash=hash_password(password),
        api_key_encrypted=encrypt_data(api_key) if api_key else None,
    )
    db_session.add(account)
    db_session.commit()
    db_session.refresh(account)
    return account


def create_template(db_session, **overrides) -> PromptTemplate:
    """Create a PromptTemplate with sensible defaults."""
    defaults = dict(
        name="Test Template",
        description="Template used in tests",
        prompt=DECK_TEMPLATE_BODY,
        category="presentation",
        is_active=True,
        is_system=False,
        version=1,
    )
    defaults.update(overrides)
    template = PromptTemplate(**defaults)
    db_session.add(template)
    db_session.commit()
    db_session.refresh(template)
    return template


def create_design_library(db_session, account, **overrides) -> DesignLibrary:
    defaults = dict(
        name="Brand",
        description="Brand tokens",
        css_variables=":root { --primary: #ff0000; }",
        analysis_result="Red primary colour",
        created_by=account.id,
    )
    defaults.update(overrides)
    library = DesignLibrary(**defaults)
    db_session.add(library)
    db_session.commit()
    db_session.refresh(library)
    return library


def create_proposal(db_session, account, **overrides) -> Proposal:
    defaults = dict(
        name="Q1 Proposal",
        html="<html><body><a href='http://localhost:3000/x'>link</a></body></html>",
        share_token="0123456789abcdef",
        created_by=account.id,
    )
    defaults.update(overrides)
    proposal = Proposal(**defaults)
    db_session.add(proposal)
    db_session.commit()
    db_session.refresh(proposal)
    return proposal
