from pydantic import Field

from sitqueue.model.base import Model


class PhotoPayload(Model):
    """
    A photo as produced by the capture plugin. Inside a queued record, `data`
    holds either the encoded image or a `file:<id>` token into the payload
    store.
    """

    data: str = Field(min_length=1)
    """Base64 encoded image, optionally as `data:image/...;base64,` uri"""
    width: int = Field(gt=0)
    height: int = Field(gt=0)

    def with_data(self, data: str) -> "PhotoPayload":
        return self.model_copy(update={"data": data})
