from sqlalchemy import select, update, or_, func
from sqlalchemy.ext.asyncio import AsyncSession
from store_ratings.models.user import User

class UserRepo:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, user_id: int) -> User | None:
        res = await self.session.execute(select(User).where(User.id == user_id))
        return res.scalars().first()

    async def get_by_email(self, email: str) -> User | None:
        res = await self.session.execute(select(User).where(User.email == email))
        return res.scalars().first()

    async def get_by_username(self, username: str) -> User | None:
        res = await self.session.execute(select(User).where(User.username == username))
        return res.scalars().first()

    async def find_by_email_or_username(self, *, email: str, username: str) -> User | None:
        res = await self.session.execute(
            select(User).where(or_(User.email == email, User.username == username))
        )
        return res.scalars().first()

    async def create(self, *, username: str, email: str, password_hash: str) -> User:
        user = User(username=username, email=email, password_hash=password_hash)
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def update_username(self, user: User, username: str) -> User:
        user.username = username
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def touch_last_login(self, user_id: int) -> None:
        await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(last_login=func.now())
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
