from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response
from sqlalchemy.engine import Engine

from ..db import get_engine
from ..domain.users import CreateUser, UpdateUser, User
from ..logs import LogContext
from ..services import user_svc

router = APIRouter()

# SQLite INTEGER 是有符号 64 位
UserId = Annotated[int, Path(ge=-(2**63), le=2**63 - 1)]


@router.get("/users", response_model=list[User])
def api_users_list(engine: Engine = Depends(get_engine)):
    with LogContext("LIST_USERS"):
        return user_svc.list_users(engine)


@router.post("/users", response_model=User)
def api_users_create(body: CreateUser, engine: Engine = Depends(get_engine)):
    with LogContext("CREATE_USER") as log:
        log.set_payload(body.model_dump())
        user = user_svc.create_user(engine, body)
        log.set_entity("user", user.id)
        return user


@router.get("/users/{user_id}", response_model=User)
def api_users_get(user_id: UserId, engine: Engine = Depends(get_engine)):
    with LogContext("GET_USER") as log:
        log.set_entity("user", user_id)
        return user_svc.get_user(engine, user_id)


@router.put("/users/{user_id}", response_model=User)
def api_users_update(user_id: UserId, body: UpdateUser, engine: Engine = Depends(get_engine)):
    with LogContext("UPDATE_USER") as log:
        log.set_entity("user", user_id)
        log.set_payload(body.model_dump(exclude_none=True))
        return user_svc.update_user(engine, user_id, body)


@router.delete("/users/{user_id}", status_code=204, response_class=Response)
def api_users_delete(user_id: UserId, engine: Engine = Depends(get_engine)):
    with LogContext("DELETE_USER") as log:
        log.set_entity("user", user_id)
        user_svc.delete_user(engine, user_id)
        return Response(status_code=204)
