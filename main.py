import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError

import config
import database
from auth import (
    AuthNotConfigured, clear_auth_cookie, issue_token, set_auth_cookie,
    verify_admin, verify_host, verify_token,
)
from database import (
    BOOKINGS, ROOMS, USERS,
    create_document, delete_result, get_db, get_documents,
    parse_object_id, serialize, update_result,
)
from payments import (
    InvalidPrice, PaymentGatewayError, PaymentGatewayUnavailable,
    StripeGateway, get_payment_gateway, to_minor_units,
)
from schemas import REQUESTED, Booking, Room, RoomStatus, RoomUpdate, User, UserUpdate
from stats import BOOKING_PROJECTION, sales_summary

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if database.db is None:
        logger.warning("DATABASE_URL is not set, store-backed routes will answer 503")
    else:
        try:
            database.ping(database.db)
            logger.info("Pinged MongoDB deployment, connection OK")
        except PyMongoError as e:
            logger.error("MongoDB ping failed: %s", e)
    yield
    if database.client is not None:
        database.client.close()


app = FastAPI(title="StayVista API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.FRONTEND_URLS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Helpers

def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


# ------------------------ ERRORS ------------------------
@app.exception_handler(AuthNotConfigured)
async def auth_unavailable_handler(request, exc):
    logger.error("Cannot issue token: %s", exc)
    return JSONResponse(status_code=503, content={"message": "auth not configured"})


@app.exception_handler(database.DatabaseUnavailable)
async def database_unavailable_handler(request, exc):
    return JSONResponse(status_code=503, content={"message": "database not configured"})


@app.exception_handler(PyMongoError)
async def database_error_handler(request, exc):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "database error"})


@app.exception_handler(PaymentGatewayUnavailable)
async def payment_unavailable_handler(request, exc):
    return JSONResponse(status_code=503, content={"message": "payment gateway not configured"})


@app.exception_handler(PaymentGatewayError)
async def payment_error_handler(request, exc):
    logger.error("Payment gateway error: %s", exc)
    return JSONResponse(status_code=502, content={"message": str(exc)})


@app.get("/")
def root():
    return {"message": "StayVista server is running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if config.DATABASE_URL else "❌ Not Set",
        "database_name": config.DATABASE_NAME,
        "connection_status": "Not Connected",
        "collections": [],
    }
    if database.db is None:
        return response
    try:
        database.ping(database.db)
        response["database"] = "✅ Connected & Working"
        response["connection_status"] = "Connected"
        response["collections"] = database.db.list_collection_names()
    except PyMongoError as e:
        response["database"] = f"❌ Error: {str(e)[:80]}"
    return response


# ------------------------ AUTH ------------------------
@app.post("/jwt")
def create_token(response: Response, identity: Dict[str, Any] = Body(...)):
    token = issue_token(identity)
    set_auth_cookie(response, token)
    logger.info("Issued token for %s", identity.get("email"))
    return {"success": True}


@app.get("/logout")
def logout(response: Response):
    clear_auth_cookie(response)
    logger.info("Logout successful")
    return {"success": True}


# ------------------------ USERS ------------------------
@app.put("/user")
def save_user(user: User, db: Database = Depends(get_db)):
    query = {"email": user.email}
    existing = db[USERS].find_one(query)
    if existing:
        # role change request: only the status moves
        if user.status == REQUESTED:
            res = db[USERS].update_one(query, {"$set": {"status": user.status}})
            return update_result(res)
        return serialize(existing)

    data = user.model_dump(exclude_none=True)
    data.setdefault("role", "guest")
    res = db[USERS].update_one(query, {"$set": {**data, "timestamp": now_ms()}}, upsert=True)
    logger.info("Saved new user %s", user.email)
    return update_result(res)


@app.get("/user/{email}")
def get_user(email: str, db: Database = Depends(get_db)):
    return serialize(db[USERS].find_one({"email": email}))


@app.patch("/users/update/{email}")
def update_user(email: str, user: UserUpdate, db: Database = Depends(get_db)):
    data = user.model_dump(exclude_unset=True)
    res = db[USERS].update_one({"email": email}, {"$set": {**data, "timestamp": now_ms()}})
    return update_result(res)


@app.get("/users", dependencies=[Depends(verify_admin)])
def list_users(db: Database = Depends(get_db)) -> List[dict]:
    return get_documents(db, USERS)


# ------------------------ ROOMS ------------------------
@app.get("/rooms")
def list_rooms(category: Optional[str] = None, db: Database = Depends(get_db)):
    query = {}
    if category and category != "null":
        query = {"category": category}
    return get_documents(db, ROOMS, query)


@app.get("/room/{room_id}")
def get_room(room_id: str, db: Database = Depends(get_db)):
    return serialize(db[ROOMS].find_one({"_id": parse_object_id(room_id)}))


@app.post("/add-room", dependencies=[Depends(verify_host)])
def add_room(room: Room, db: Database = Depends(get_db)):
    return create_document(db, ROOMS, room)


@app.put("/room/update/{room_id}", dependencies=[Depends(verify_host)])
def update_room(room_id: str, room: RoomUpdate, db: Database = Depends(get_db)):
    data = room.model_dump(by_alias=True, exclude_unset=True)
    data.pop("_id", None)
    if not data:
        raise HTTPException(status_code=400, detail="Nothing to update")
    res = db[ROOMS].update_one({"_id": parse_object_id(room_id)}, {"$set": data})
    return update_result(res)


@app.get("/my-list/{email}", dependencies=[Depends(verify_host)])
def list_host_rooms(email: str, db: Database = Depends(get_db)):
    return get_documents(db, ROOMS, {"host.email": email})


@app.delete("/room/{room_id}", dependencies=[Depends(verify_host)])
def delete_room(room_id: str, db: Database = Depends(get_db)):
    res = db[ROOMS].delete_one({"_id": parse_object_id(room_id)})
    return delete_result(res)


@app.patch("/room/status/{room_id}")
def update_room_status(room_id: str, payload: RoomStatus, db: Database = Depends(get_db)):
    res = db[ROOMS].update_one({"_id": parse_object_id(room_id)}, {"$set": {"booked": payload.status}})
    return update_result(res)


# ------------------------ PAYMENTS ------------------------
@app.post("/create-payment-intent", dependencies=[Depends(verify_token)])
def create_payment_intent(
    payload: Optional[Dict[str, Any]] = Body(default=None),
    gateway: StripeGateway = Depends(get_payment_gateway),
):
    try:
        amount = to_minor_units((payload or {}).get("price"))
    except InvalidPrice as e:
        raise HTTPException(status_code=400, detail=str(e))
    client_secret = gateway.create_payment_intent(amount)
    return {"clientSecret": client_secret}


# ------------------------ BOOKINGS ------------------------
@app.post("/booking", dependencies=[Depends(verify_token)])
def create_booking(booking: Booking, db: Database = Depends(get_db)):
    data = booking.model_dump(exclude_none=True)
    # the client sends the room document along; its _id must not collide
    data.pop("_id", None)
    return create_document(db, BOOKINGS, data)


@app.get("/manage-bookings/{email}", dependencies=[Depends(verify_host)])
def list_host_bookings(email: str, db: Database = Depends(get_db)):
    return get_documents(db, BOOKINGS, {"host.email": email})


@app.get("/my-bookings/{email}", dependencies=[Depends(verify_token)])
def list_guest_bookings(email: str, db: Database = Depends(get_db)):
    return get_documents(db, BOOKINGS, {"guest.email": email})


@app.delete("/booking/{booking_id}", dependencies=[Depends(verify_token)])
def delete_booking(booking_id: str, db: Database = Depends(get_db)):
    res = db[BOOKINGS].delete_one({"_id": parse_object_id(booking_id)})
    return delete_result(res)


# ------------------------ DASHBOARDS ------------------------
@app.get("/admin-stat", dependencies=[Depends(verify_admin)])
def admin_stat(db: Database = Depends(get_db)):
    bookings = get_documents(db, BOOKINGS, projection=BOOKING_PROJECTION)
    return {
        "totalUsers": db[USERS].count_documents({}),
        "totalRooms": db[ROOMS].count_documents({}),
        **sales_summary(bookings),
    }


@app.get("/host-stat")
def host_stat(claims: Dict[str, Any] = Depends(verify_host), db: Database = Depends(get_db)):
    email = claims["email"]
    bookings = get_documents(db, BOOKINGS, {"host.email": email}, BOOKING_PROJECTION)
    user = db[USERS].find_one({"email": email}, {"timestamp": 1})
    return {
        "totalRooms": db[ROOMS].count_documents({"host.email": email}),
        **sales_summary(bookings),
        "hostSince": (user or {}).get("timestamp"),
    }


@app.get("/guest-stat")
def guest_stat(claims: Dict[str, Any] = Depends(verify_token), db: Database = Depends(get_db)):
    email = claims.get("email")
    bookings = get_documents(db, BOOKINGS, {"guest.email": email}, BOOKING_PROJECTION)
    user = db[USERS].find_one({"email": email}, {"timestamp": 1})
    return {
        **sales_summary(bookings),
        "guestSince": (user or {}).get("timestamp"),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
