"""
People service - business logic for the Person table
"""

import logging
import uuid
from typing import Optional
from services.base_service import BaseService, ServiceResult

logger = logging.getLogger(__name__)

# Cast so the identifier reads and compares as text whether the column is text or uuid
PERSON_COLUMNS = ["name", "nickname", "uuid::text AS uuid"]

class PeopleService(BaseService):
    """Service for Person CRUD operations"""

    def __init__(self):
        super().__init__("Person", PERSON_COLUMNS)

    async def list_people(self) -> ServiceResult:
        """Get every person in the table"""
        return await self.fetch(self.select_all_sql)

    async def get_person(self, person_id: str) -> ServiceResult:
        """Get the person with the given identifier (zero or one rows)"""
        return await self.fetch(f"{self.select_all_sql} WHERE uuid::text = $1", person_id)

    async def create_person(self, name: str, nickname: str) -> ServiceResult:
        """
        Insert a new person under a freshly generated identifier

        Args:
            name: Person's name
            nickname: Person's nickname

        Returns:
            ServiceResult with the full table after the insert
        """
        person_id = str(uuid.uuid4())
        logger.info(f"Creating person {person_id}")
        return await self.execute_and_reread(
            "INSERT INTO Person (name, nickname, uuid) VALUES ($1, $2, $3)",
            name, nickname, person_id
        )

    async def delete_person(self, person_id: str) -> ServiceResult:
        """Delete by identifier; a missing identifier is not an error"""
        logger.info(f"Deleting person {person_id}")
        return await self.execute_and_reread("DELETE FROM Person WHERE uuid::text = $1", person_id)

    async def update_person(self, person_id: str, name: str, nickname: str) -> ServiceResult:
        """Update name and nickname; the identifier itself never changes"""
        logger.info(f"Updating person {person_id}")
        return await self.execute_and_reread(
            "UPDATE Person SET name = $1, nickname = $2 WHERE uuid::text = $3",
            name, nickname, person_id
        )

# Global service instance
_people_service: Optional[PeopleService] = None

def get_people_service() -> PeopleService:
    """Get the global people service instance"""
    global _people_service
    if _people_service is None:
        _people_service = PeopleService()
    return _people_service
