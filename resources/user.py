import logging

from flask.views import MethodView
from flask_jwt_extended import create_access_token, jwt_required, get_jwt
from passlib.hash import pbkdf2_sha256
from sqlalchemy.exc import SQLAlchemyError

from blocklist import BLOCKLIST
from db import db
from errors import ApiError, ConflictError, NotFoundError, StoreError
from models import UserModel
from resources import Blueprint
from schemas import UserSchema, UpdateUserSchema, LoginUserSchema, TokenSchema, UserListQueryArgsSchema

logger = logging.getLogger(__name__)

blp = Blueprint("users", "users", description="Users operations")


class InvalidCredentialsError(ApiError):
    status_code = 401


def get_user_or_404(user_id):
    try:
        user = db.session.get(UserModel, user_id)
    except SQLAlchemyError as e:
        logger.exception("Get user error")
        raise StoreError(details=str(e))
    if user is None:
        raise NotFoundError("User not found")
    return user


def check_unique(username=None, email=None, exclude_user_id=None):
    """Raise ``ConflictError`` when another user already holds the username or email."""
    for column, value in ((UserModel.username, username), (UserModel.email, email)):
        if value is None:
            continue
        query = UserModel.query.filter(column == value)
        if exclude_user_id is not None:
            query = query.filter(UserModel.user_id != exclude_user_id)
        try:
            taken = query.first()
        except SQLAlchemyError as e:
            logger.exception("Check unique user error")
            raise StoreError(details=str(e))
        if taken:
            raise ConflictError(f"A user with {column.key} '{value}' already exists")


@blp.route("/users", methods=["POST"])
class Register(MethodView):
    @blp.arguments(UserSchema)
    @blp.response(201, UserSchema)
    def post(self, user_data):
        username = user_data["username"].strip()
        email = user_data["email"]

        check_unique(username=username, email=email)

        user = UserModel(
            **{**user_data, "username": username, "password": pbkdf2_sha256.hash(user_data["password"])}
        )

        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Create user error")
            raise StoreError(details=str(e))

        logger.info("Registered user %s", user.user_id)
        return user


@blp.route("/login", methods=["POST"])
class Login(MethodView):
    @blp.arguments(LoginUserSchema)
    @blp.response(200, TokenSchema)
    def post(self, user_data):
        try:
            user = UserModel.query.filter(UserModel.username == user_data["username"]).first()
        except SQLAlchemyError as e:
            logger.exception("Login error")
            raise StoreError(details=str(e))
        if not user or not pbkdf2_sha256.verify(user_data["password"], user.password):
            raise InvalidCredentialsError("Username or password is not correct. Please try again.")

        token = create_access_token(identity=str(user.user_id), additional_claims={"role": user.role})
        return {"access_token": token, "user_id": user.user_id, "role": user.role}


@blp.route("/logout", methods=["POST"])
class Logout(MethodView):
    @jwt_required()
    def post(self):
        jti = get_jwt()["jti"]
        BLOCKLIST.add(jti)
        return {"message": "Successfully logged out"}, 200


@blp.route("/users/all", methods=["GET"])
class UserList(MethodView):
    @blp.response(200, UserSchema(many=True))
    def get(self):
        try:
            return UserModel.query.order_by(UserModel.user_id).all()
        except SQLAlchemyError as e:
            logger.exception("Get users error")
            raise StoreError(details=str(e))


@blp.route("/users/volunteers", methods=["GET"])
class VolunteerList(MethodView):
    @blp.arguments(UserListQueryArgsSchema, location='query')
    @blp.response(200, UserSchema(many=True))
    def get(self, args):
        volunteers_query = UserModel.query.filter(UserModel.role == 'Volunteer')
        if args.get('department'):
            volunteers_query = volunteers_query.filter(UserModel.department == args['department'])
        if args.get('availability'):
            volunteers_query = volunteers_query.filter(UserModel.availability == args['availability'])
        try:
            return volunteers_query.order_by(UserModel.username).all()
        except SQLAlchemyError as e:
            logger.exception("Get volunteers error")
            raise StoreError(details=str(e))


@blp.route("/users/<int:user_id>", methods=["GET", "PUT", "DELETE"])
class User(MethodView):
    @blp.response(200, UserSchema)
    def get(self, user_id):
        return get_user_or_404(user_id)

    @blp.arguments(UpdateUserSchema)
    @blp.response(200, UserSchema)
    def put(self, user_data, user_id):
        user = get_user_or_404(user_id)

        if "username" in user_data:
            user_data["username"] = user_data["username"].strip()
        check_unique(user_data.get("username"), user_data.get("email"), exclude_user_id=user_id)

        for key, value in user_data.items():
            setattr(user, key, value)

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Update user error")
            raise StoreError("Failed to update user.", details=str(e))

        return user

    @blp.response(204)
    def delete(self, user_id):
        user = get_user_or_404(user_id)

        try:
            db.session.delete(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.exception("Delete user error")
            raise StoreError("Failed to delete user.", details=str(e))
