import unittest
import uuid
from datetime import timedelta

from sqlalchemy.exc import IntegrityError, NoResultFound

from tests.support import BASE_TIME, DatabaseTestCase
from user_admin.domain.users.criteria import UserCriteria
from user_admin.domain.users.schemas import UserStatus
from user_admin.persistence.repositories.user_repo import UserRepository


class TestUserRepository(DatabaseTestCase):
    async def test_find_many_orders_newest_first_and_pages(self):
        for offset in range(5):
            await self.seed(name=f"User {offset}", created_at=BASE_TIME + timedelta(days=offset))

        async with self.session_factory() as session:
            repo = UserRepository(session)
            total, rows = await repo.count_and_find_many(UserCriteria(), skip=1, take=2)

        self.assertEqual(total, 5)
        self.assertEqual([row.name for row in rows], ["User 3", "User 2"])

    async def test_soft_deleted_rows_are_excluded_unless_requested(self):
        live = await self.seed(email="live@example.com")
        gone = await self.seed(email="gone@example.com", deleted_at=BASE_TIME)

        async with self.session_factory() as session:
            repo = UserRepository(session)

            self.assertEqual(await repo.count(UserCriteria()), 1)
            self.assertIsNone(await repo.find_first(UserCriteria(id=gone.id)))
            self.assertIsNotNone(await repo.find_first(UserCriteria(id=live.id)))
            self.assertTrue(await repo.exists(UserCriteria(id=gone.id, include_deleted=True)))
            self.assertEqual((await repo.find_by_email("gone@example.com")).id, gone.id)

    async def test_name_match_is_case_insensitive_and_literal(self):
        await self.seed(name="Johnny Appleseed")
        await self.seed(name="Maria JOHNSON")
        await self.seed(name="100% Real")
        await self.seed(name="Someone Else")

        async with self.session_factory() as session:
            repo = UserRepository(session)

            self.assertEqual(await repo.count(UserCriteria(name_contains="john")), 2)
            self.assertEqual(await repo.count(UserCriteria(name_contains="%")), 1)

    async def test_status_and_date_bounds(self):
        await self.seed(status=UserStatus.ACTIVE, created_at=BASE_TIME)
        await self.seed(status=UserStatus.SUSPENDED, created_at=BASE_TIME + timedelta(days=10))
        await self.seed(status=UserStatus.ACTIVE, created_at=BASE_TIME + timedelta(days=20))

        async with self.session_factory() as session:
            repo = UserRepository(session)

            self.assertEqual(await repo.count(UserCriteria(status=UserStatus.ACTIVE)), 2)
            self.assertEqual(
                await repo.count(UserCriteria(created_from=BASE_TIME + timedelta(days=5))),
                2,
            )
            self.assertEqual(
                await repo.count(
                    UserCriteria(
                        created_from=BASE_TIME + timedelta(days=5),
                        created_to=BASE_TIME + timedelta(days=15),
                    )
                ),
                1,
            )

    async def test_create_rejects_duplicate_email(self):
        await self.seed(email="dup@example.com", deleted_at=BASE_TIME)

        async with self.session_factory() as session:
            repo = UserRepository(session)

            with self.assertRaises(IntegrityError):
                await repo.create(name="Dup", email="dup@example.com", status=UserStatus.ACTIVE)

    async def test_create_loads_server_timestamps(self):
        async with self.session_factory() as session:
            repo = UserRepository(session)
            user = await repo.create(name="Fresh", email="fresh@example.com", status=UserStatus.ACTIVE)
            await repo.commit()

            self.assertIsNotNone(user.created_at)
            self.assertIsNotNone(user.updated_at)
            self.assertIsNone(user.deleted_at)

    async def test_update_returns_fresh_row(self):
        user = await self.seed(name="Before", email="before@example.com")

        async with self.session_factory() as session:
            repo = UserRepository(session)
            updated = await repo.update(user.id, {"name": "After"})
            await repo.commit()

        self.assertEqual(updated.name, "After")
        self.assertEqual(updated.email, "before@example.com")

    async def test_update_missing_row_raises_no_result_found(self):
        async with self.session_factory() as session:
            repo = UserRepository(session)

            with self.assertRaises(NoResultFound):
                await repo.update(uuid.uuid4(), {"name": "Nobody"})

    async def test_update_many_only_touches_active_rows(self):
        gone = await self.seed(deleted_at=BASE_TIME)

        async with self.session_factory() as session:
            repo = UserRepository(session)
            affected = await repo.update_many(UserCriteria(id=gone.id), {"name": "Changed"})

        self.assertEqual(affected, 0)


if __name__ == "__main__":
    unittest.main()
