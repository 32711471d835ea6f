from __future__ import annotations

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class MenuItemResponse(BaseModel):
    itemId: str
    name: str
    category: str
    price: MoneyResponse
    isAvailable: bool
    description: str | None = None


class OrderLineItemResponse(BaseModel):
    lineId: str
    menuItem: MenuItemResponse
    quantity: int
    lineTotal: MoneyResponse
    notes: str | None = None


class TableResponse(BaseModel):
    tableId: str
    number: int
    status: str
    capacity: int
    area: str
    order: list[OrderLineItemResponse] = Field(default_factory=list)
    subtotal: MoneyResponse
    startTime: datetime | None = None
    mergedWith: list[str] | None = None
    mergeType: str | None = None
    mainTableId: str | None = None


class CompletedOrderResponse(BaseModel):
    orderId: str
    tableId: str
    tableNumber: int
    items: list[OrderLineItemResponse] = Field(default_factory=list)
    discount: MoneyResponse
    total: MoneyResponse
    status: str
    paymentMethod: str
    timestamp: datetime


class InventoryItemResponse(BaseModel):
    itemId: str
    name: str
    unit: str
    currentStock: float
    minStock: float
    lastUpdated: datetime


class FloorCommandResponse(BaseModel):
    command: str
    outcome: str
    detail: str | None = None
    createdId: str | None = None
    tables: list[TableResponse] = Field(default_factory=list)


class FloorSnapshotResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)
    menuItems: list[MenuItemResponse] = Field(default_factory=list)
    completedOrders: list[CompletedOrderResponse] = Field(default_factory=list)


class DailySalesResponse(BaseModel):
    day: date
    orders: int
    revenue: MoneyResponse


class ItemSalesResponse(BaseModel):
    itemId: str
    name: str
    quantity: int
    revenue: MoneyResponse


class SalesReportResponse(BaseModel):
    startDate: date
    endDate: date
    totalRevenue: MoneyResponse
    totalOrders: int
    totalExpenses: MoneyResponse
    netProfit: MoneyResponse
    averageOrderValue: MoneyResponse
    completedOrders: int
    cancelledOrders: int
    totalDiscounts: MoneyResponse
    dailySales: list[DailySalesResponse] = Field(default_factory=list)
    itemSales: list[ItemSalesResponse] = Field(default_factory=list)
    paymentMethods: dict[str, int] = Field(default_factory=dict)
    staffPresent: int
    attendanceRate: int


class DashboardSummaryResponse(BaseModel):
    tableStatusCounts: dict[str, int] = Field(default_factory=dict)
    todayOrders: int
    todayRevenue: MoneyResponse
    lowStockItems: list[InventoryItemResponse] = Field(default_factory=list)
    presentStaff: int


class UserProfileResponse(BaseModel):
    firstName: str
    lastName: str
    phone: str
    position: str
    avatar: str | None = None
    permissions: list[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    id: str
    username: str
    email: str
    role: str
    profile: UserProfileResponse
    isActive: bool
    lastLogin: datetime | None = None
    createdAt: datetime
    updatedAt: datetime


class TokensResponse(BaseModel):
    accessToken: str
    refreshToken: str


class AuthDataResponse(BaseModel):
    user: UserResponse
    tokens: TokensResponse


class AuthResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    data: AuthDataResponse


class UserDataResponse(BaseModel):
    user: UserResponse


class UserEnvelopeResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str | None = None
    data: UserDataResponse


class TokensDataResponse(BaseModel):
    tokens: TokensResponse


class RefreshResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    data: TokensDataResponse


class MessageResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str


class PaginationResponse(BaseModel):
    currentPage: int
    totalPages: int
    totalUsers: int
    hasNext: bool
    hasPrev: bool


class UsersPageDataResponse(BaseModel):
    users: list[UserResponse] = Field(default_factory=list)
    pagination: PaginationResponse


class UsersPageResponse(BaseModel):
    status: Literal["success"] = "success"
    data: UsersPageDataResponse


class PlaceholderDataResponse(BaseModel):
    available: bool = False


class PlaceholderResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str
    data: PlaceholderDataResponse = Field(default_factory=PlaceholderDataResponse)
