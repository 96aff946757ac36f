"""
Repositories

Owner-scoped access to calls and agents, plus account lookup and creation
for the auth routes. Ownership is always part of the same query as the identifier;
a record is never fetched by id first and checked afterwards.
"""

from typing import Any, Dict, Optional, List, Tuple

from sqlalchemy import delete, select, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ai_caller.core.exceptions import AccountExistsError, StorageError
from ai_caller.core.logging import get_logger
from .models import Call, Agent, User

logger = get_logger(__name__)


class CallRepository:
    """Call record accessor"""

    def __init__(self, session: Session):
        self.session = session

    def get_call(self, call_id: str, owner_id: str) -> Optional[Call]:
        """
        Get one call owned by `owner_id`, with its agent loaded.

        Returns:
            The call, or None when no call matches both id and owner.

        Raises:
            StorageError: On unexpected database failure
        """
        query = (
            select(Call)
            .options(joinedload(Call.agent))
            .where(Call.id == call_id, Call.user_id == owner_id)
        )
        try:
            return self.session.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(f"Call lookup failed for {call_id}: {e}", operation="get_call") from e

    def list_calls(
        self,
        owner_id: str,
        agent_id: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Call], int]:
        """List an account's calls, newest first, with the total count"""
        conditions = [Call.user_id == owner_id]
        if agent_id:
            conditions.append(Call.agent_id == agent_id)

        query = (
            select(Call)
            .options(joinedload(Call.agent))
            .where(*conditions)
            .order_by(Call.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        count_query = select(func.count()).select_from(Call).where(*conditions)

        try:
            calls = list(self.session.execute(query).scalars().all())
            total = self.session.execute(count_query).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Call listing failed for owner {owner_id}: {e}", operation="list_calls") from e

        return calls, total


class AgentRepository:
    """Owner-scoped agent access"""

    def __init__(self, session: Session):
        self.session = session

    def get_agent(self, agent_id: str, owner_id: str) -> Optional[Agent]:
        query = select(Agent).where(Agent.id == agent_id, Agent.user_id == owner_id)
        try:
            return self.session.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(f"Agent lookup failed for {agent_id}: {e}", operation="get_agent") from e

    def list_agents(self, owner_id: str) -> List[Agent]:
        query = select(Agent).where(Agent.user_id == owner_id).order_by(Agent.created_at.desc())
        try:
            return list(self.session.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Agent listing failed for owner {owner_id}: {e}", operation="list_agents") from e

    def create_agent(self, owner_id: str, **fields: Any) -> Agent:
        """Create an agent owned by `owner_id`"""
        agent = Agent(user_id=owner_id, **fields)
        try:
            self.session.add(agent)
            self.session.commit()
            self.session.refresh(agent)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"Agent creation failed for owner {owner_id}: {e}", operation="create_agent") from e

        logger.info(f"Created agent {agent.id} for user {owner_id}")
        return agent

    def update_agent(self, agent_id: str, owner_id: str, changes: Dict[str, Any]) -> Optional[Agent]:
        """
        Apply `changes` to an agent owned by `owner_id`.

        Returns:
            The updated agent, or None when no agent matches both id and owner.
        """
        agent = self.get_agent(agent_id, owner_id)
        if not agent:
            return None

        for field, value in changes.items():
            setattr(agent, field, value)

        try:
            self.session.commit()
            self.session.refresh(agent)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"Agent update failed for {agent_id}: {e}", operation="update_agent") from e

        return agent

    def delete_agent(self, agent_id: str, owner_id: str) -> bool:
        """
        Delete an agent owned by `owner_id`. Its calls are kept and lose the reference.

        Returns:
            True if an agent was deleted
        """
        query = delete(Agent).where(Agent.id == agent_id, Agent.user_id == owner_id)
        try:
            result = self.session.execute(query)
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"Agent deletion failed for {agent_id}: {e}", operation="delete_agent") from e

        return result.rowcount > 0


class UserRepository:
    """Account lookup and creation"""

    def __init__(self, session: Session):
        self.session = session

    def get_user(self, user_id: str) -> Optional[User]:
        try:
            return self.session.get(User, user_id)
        except SQLAlchemyError as e:
            raise StorageError(f"User lookup failed for {user_id}: {e}", operation="get_user") from e

    def get_user_by_email(self, email: str) -> Optional[User]:
        query = select(User).where(User.email == email)
        try:
            return self.session.execute(query).scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(f"User lookup failed for {email}: {e}", operation="get_user_by_email") from e

    def create_user(self, email: str, password_hash: str, name: Optional[str] = None) -> User:
        """
        Create an account with no credits.

        Raises:
            AccountExistsError: If the email is already registered
            StorageError: On unexpected database failure
        """
        user = User(email=email, password_hash=password_hash, name=name, credits_balance=0.0)
        try:
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        except IntegrityError as e:
            self.session.rollback()
            raise AccountExistsError(email) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"User creation failed for {email}: {e}", operation="create_user") from e

        return user

    def list_users(self, limit: int = 50, offset: int = 0) -> Tuple[List[User], int]:
        """List all accounts, newest first, with the total count"""
        query = select(User).order_by(User.created_at.desc()).limit(limit).offset(offset)
        count_query = select(func.count()).select_from(User)
        try:
            users = list(self.session.execute(query).scalars().all())
            total = self.session.execute(count_query).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"User listing failed: {e}", operation="list_users") from e

        return users, total

    def set_role(self, email: str, role: str) -> Optional[User]:
        """Change an account's role. Returns None when no account has that email."""
        user = self.get_user_by_email(email)
        if not user:
            return None

        user.role = role
        try:
            self.session.commit()
            self.session.refresh(user)
        except SQLAlchemyError as e:
            self.session.rollback()
            raise StorageError(f"Role update failed for {email}: {e}", operation="set_role") from e

        return user
