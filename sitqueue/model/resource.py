from pydantic import Field

from sitqueue.model.base import Model


class Location(Model):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class Sit(Model):
    """A known (remote or local) place"""

    id: str
    location: Location
    image_collection_id: str | None = None


class Attachment(Model):
    """A photo attached to a sit as known to the caller"""

    id: str
    actor_id: str
    collection_id: str | None = None
