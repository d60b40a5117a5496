from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Literal
from pydantic import BaseModel, Field
from .summarization.assembler import fallback_summary

class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=6)

class LoginRequest(BaseModel):
    email: str
    password: str

class UserOut(BaseModel):
    id: str
    name: str
    email: str

class User(UserOut):
    password_hash: str
    created_at: datetime

class AuthResponse(BaseModel):
    token: str
    user: UserOut


class NoteCreate(BaseModel):
    title: str = Field(..., min_length=1, description="Note title")
    content: str = Field("", description="Free text body; summarized on save")
    tags: List[str] = Field(default_factory=list)

class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    content: Optional[str] = None
    tags: Optional[List[str]] = None

class Note(BaseModel):
    id: str
    user: str
    title: str
    content: str
    tags: List[str] = Field(default_factory=list)
    summary: List[str] = Field(default_factory=fallback_summary, min_length=1, max_length=8)
    created_at: datetime
    updated_at: datetime


class SummarizeRequest(BaseModel):
    content: str = ""

class SummarizeResponse(BaseModel):
    summary: List[str]

class MessageResponse(BaseModel):
    message: str

ExportFormat = Literal["markdown", "json"]
