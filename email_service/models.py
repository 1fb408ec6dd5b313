
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any

class OrderPayload(BaseModel):
    # items, addresses, costs etc. pass through untouched to the template
    model_config = ConfigDict(extra="allow")

    order_id: str = Field(min_length=1)

class OrderConfirmationRequest(BaseModel):
    email: str = Field(min_length=1)
    order: OrderPayload

    def order_data(self) -> Dict[str, Any]:
        return self.order.model_dump()

class SendResponse(BaseModel):
    status: str

class ErrorDetail(BaseModel):
    code: str
    message: str
    order_id: Optional[str] = None
    trace_id: Optional[str] = None

class ErrorResponse(BaseModel):
    error: ErrorDetail
