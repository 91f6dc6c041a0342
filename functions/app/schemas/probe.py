from pydantic import BaseModel


class ProbeResponse(BaseModel):
    client: str | None = None
    target_url: str
    final_url: str
    status_code: int
    elapsed_milliseconds: int
