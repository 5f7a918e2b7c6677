"""Advertiser and AdvertiserMember ORM models.

A user linked to an advertiser through ``usuarios_anunciantes`` is an owner
of that advertiser's agenda.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from vitrii_agenda.database import Base


class Advertiser(Base):
    __tablename__ = "anunciantes"

    advertiser_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(150), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    members = relationship("AdvertiserMember", back_populates="advertiser", cascade="all, delete-orphan")


class AdvertiserMember(Base):
    __tablename__ = "usuarios_anunciantes"

    advertiser_id = Column(Integer, ForeignKey("anunciantes.advertiser_id"), primary_key=True)
    user_id = Column(Integer, ForeignKey("usuarios.user_id"), primary_key=True)
    linked_at = Column(DateTime(timezone=True), server_default=func.now())

    advertiser = relationship("Advertiser", back_populates="members")
