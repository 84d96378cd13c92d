from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional

class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = ""
    price: Optional[str] = Field(None, description="Price text as rendered on the page")
    in_stock: Optional[bool] = Field(None, alias="inStock")
    name: Optional[str] = None
    brand: Optional[str] = None

class VariantResult(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sku: str
    name: str
    url: str
    image_url: str = Field(alias="imageUrl")

class BatchResultRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    original_index: int = Field(alias="originalIndex", ge=0)
    url: str
    success: bool
    extraction: Optional[ExtractionResult] = None
    error_message: Optional[str] = Field(None, alias="errorMessage")
    sku: Optional[str] = Field(None, description="skuId query parameter of the input URL")
    # Upstream HTTP status of a failed fetch, for the single-URL route
    status_code: Optional[int] = Field(None, exclude=True)

class BatchResult(BaseModel):
    results: List[BatchResultRecord]

    @computed_field
    @property
    def total(self) -> int:
        return len(self.results)

    @computed_field
    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @computed_field
    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

# HTTP payloads

class ScrapeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    api_key: Optional[str] = Field(None, alias="apiKey")
    country: Optional[str] = None

class BatchScrapeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    urls: List[str]
    api_key: Optional[str] = Field(None, alias="apiKey")
    country: Optional[str] = None
    concurrency: Optional[int] = Field(None, description="Worker count, clamped to 1-10")
    deadline: Optional[float] = Field(None, gt=0, description="Seconds before queued URLs are abandoned")

class ScrapeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    price: Optional[str] = None
    in_stock: Optional[bool] = Field(None, alias="inStock")
    name: Optional[str] = None
    brand: Optional[str] = None
    source_url: str = Field(alias="sourceUrl")

class VariantsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    variants: List[VariantResult] = Field(default_factory=list)
    product_name: str = Field(alias="productName")
    total: int = 0
    error: Optional[str] = None
