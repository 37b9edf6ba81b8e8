"""Comment routes."""

from uuid import UUID

import logfire
from dishka import AsyncContainer
from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from cookbook.application.usecase.comment import (
    AddReplyRequest,
    AddReplyResponse,
    AddReplyUseCase,
    CreateCommentRequest,
    CreateCommentResponse,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentStatsRequest,
    GetCommentStatsResponse,
    GetCommentStatsUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
    GetUserRatingRequest,
    GetUserRatingResponse,
    GetUserRatingUseCase,
    SyncRecipeRatingRequest,
    SyncRecipeRatingResponse,
    SyncRecipeRatingUseCase,
    UpdateCommentRequest,
    UpdateCommentResponse,
    UpdateCommentUseCase,
    to_comment_item,
)
from cookbook.domain.error import (
    DomainError,
    NotAuthorizedError,
    NotFoundError,
    PolicyError,
    RatingWriteError,
    StoreUnavailableError,
    ValidationError,
)
from cookbook.domain.model import Comment
from cookbook.domain.service import CommentService
from cookbook.domain.value import RecipeId
from cookbook.interface.api.identity import CurrentUser, require_user

router = APIRouter(
    prefix="/recipes/{recipe_id}/comments",
    tags=["comments"],
    route_class=DishkaRoute,
)

# WebSocket close code for an unknown recipe (application range 4000-4999)
WS_RECIPE_NOT_FOUND = 4404


def _http_error(error: DomainError) -> HTTPException:
    """Translate a domain error into the matching HTTP error."""
    if isinstance(error, ValidationError):
        logfire.warn("Comment validation failed", issues=[i.value for i in error.issues])
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(error), "issues": [i.value for i in error.issues]},
        )
    if isinstance(error, PolicyError):
        logfire.warn("Comment rejected by rating policy", error=str(error))
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    if isinstance(error, NotAuthorizedError):
        logfire.warn("Unauthorized comment change", error=str(error))
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, (StoreUnavailableError, RatingWriteError)):
        logfire.error("Comment store unavailable", error=str(error))
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(error)
        )

    logfire.error("Unexpected domain error", error=str(error))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error)
    )


class CreateCommentAPIRequest(BaseModel):
    """API request for posting a review."""

    text: str
    rating: int | None = None


class ReplyAPIRequest(BaseModel):
    """API request for replying to a review."""

    text: str


class UpdateCommentAPIRequest(BaseModel):
    """API request for editing a comment.

    Omitted fields are left unchanged; ``"rating": null`` clears the rating.
    """

    text: str | None = None
    rating: int | None = None


@router.get("", response_model=GetCommentsResponse)
async def get_comments(
    recipe_id: UUID,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
) -> GetCommentsResponse:
    """Get a recipe's comment threads and rating summary.

    Reviews are newest first; replies under each review oldest first.
    """
    try:
        return await get_comments_use_case.execute(
            GetCommentsRequest(recipe_id=str(recipe_id))
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.get("/stats", response_model=GetCommentStatsResponse)
async def get_comment_stats(
    recipe_id: UUID,
    get_comment_stats_use_case: FromDishka[GetCommentStatsUseCase],
) -> GetCommentStatsResponse:
    """Review and reply counts with the rating summary."""
    try:
        return await get_comment_stats_use_case.execute(
            GetCommentStatsRequest(recipe_id=str(recipe_id))
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.get("/mine", response_model=GetUserRatingResponse)
async def get_my_rating(
    recipe_id: UUID,
    get_user_rating_use_case: FromDishka[GetUserRatingUseCase],
    user: CurrentUser = Depends(require_user),
) -> GetUserRatingResponse:
    """The caller's rated review on this recipe, if any."""
    try:
        return await get_user_rating_use_case.execute(
            GetUserRatingRequest(recipe_id=str(recipe_id), user_id=user.user_id)
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.post(
    "",
    response_model=CreateCommentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    recipe_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    user: CurrentUser = Depends(require_user),
) -> CreateCommentResponse:
    """Post a review, optionally with a 1-5 star rating.

    Args:
        recipe_id: Recipe UUID
        request: Review text and rating
        create_comment_use_case: Create comment use case from DI
        user: Caller identity from headers

    Returns:
        Created comment; ``rating_stale`` is set if the recipe rating
        could not be refreshed

    Raises:
        HTTPException: 422 invalid input, 409 rating not allowed, 404 unknown recipe
    """
    try:
        return await create_comment_use_case.execute(
            CreateCommentRequest(
                recipe_id=str(recipe_id),
                author_id=user.user_id,
                author_email=user.email,
                author_name=user.display_name,
                author_photo_url=user.photo_url,
                text=request.text,
                rating=request.rating,
            )
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.post(
    "/{comment_id}/replies",
    response_model=AddReplyResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_reply(
    recipe_id: UUID,
    comment_id: UUID,
    request: ReplyAPIRequest,
    add_reply_use_case: FromDishka[AddReplyUseCase],
    user: CurrentUser = Depends(require_user),
) -> AddReplyResponse:
    """Reply to a review. Replies cannot carry a rating."""
    try:
        return await add_reply_use_case.execute(
            AddReplyRequest(
                recipe_id=str(recipe_id),
                parent_id=str(comment_id),
                author_id=user.user_id,
                author_email=user.email,
                author_name=user.display_name,
                author_photo_url=user.photo_url,
                text=request.text,
            )
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.patch("/{comment_id}", response_model=UpdateCommentResponse)
async def update_comment(
    recipe_id: UUID,
    comment_id: UUID,
    request: UpdateCommentAPIRequest,
    update_comment_use_case: FromDishka[UpdateCommentUseCase],
    user: CurrentUser = Depends(require_user),
) -> UpdateCommentResponse:
    """Edit the caller's own comment.

    Only the comment author can edit.

    Raises:
        HTTPException: 403 not the author, 404 unknown comment or comment on
            another recipe, 409 rating not allowed
    """
    try:
        return await update_comment_use_case.execute(
            UpdateCommentRequest(
                comment_id=str(comment_id),
                user_id=user.user_id,
                recipe_id=str(recipe_id),
                **request.model_dump(exclude_unset=True),
            )
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.delete("/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    recipe_id: UUID,
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    user: CurrentUser = Depends(require_user),
) -> DeleteCommentResponse | JSONResponse:
    """Delete the caller's own comment and every reply beneath it.

    A 500 with ``retry: true`` means part of the thread is gone; the
    listed deletes stand and repeating the request finishes the job.
    """
    try:
        response = await delete_comment_use_case.execute(
            DeleteCommentRequest(
                comment_id=str(comment_id),
                user_id=user.user_id,
                recipe_id=str(recipe_id),
            )
        )
    except DomainError as e:
        raise _http_error(e) from e

    if not response.complete:
        # Returned rather than raised so the partial deletes are committed
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": {
                    "message": f"Cascade delete of comment {comment_id} incomplete",
                    "deleted_ids": response.deleted_ids,
                    "remaining_ids": response.remaining_ids,
                    "retry": True,
                }
            },
        )
    return response


@router.post("/rating/sync", response_model=SyncRecipeRatingResponse)
async def sync_recipe_rating(
    recipe_id: UUID,
    sync_recipe_rating_use_case: FromDishka[SyncRecipeRatingUseCase],
) -> SyncRecipeRatingResponse:
    """Recompute the recipe's stored rating from its comments."""
    try:
        return await sync_recipe_rating_use_case.execute(
            SyncRecipeRatingRequest(recipe_id=str(recipe_id))
        )
    except DomainError as e:
        raise _http_error(e) from e


@router.websocket("/feed")
async def comment_feed(websocket: WebSocket, recipe_id: UUID) -> None:
    """Push the recipe's full comment list on connect and after every change.

    Each message is ``{"recipe_id": ..., "comments": [...]}`` with comments
    newest first.
    """
    await websocket.accept()
    container: AsyncContainer = websocket.app.state.dishka_container

    async def push(comments: list[Comment]) -> None:
        await websocket.send_json(
            {
                "recipe_id": str(recipe_id),
                "comments": [
                    to_comment_item(c).model_dump(mode="json") for c in comments
                ],
            }
        )

    # The request scope only covers subscribing; snapshots after that are
    # loaded by whichever request made the change.
    async with container() as request_container:
        comment_service = await request_container.get(CommentService)
        try:
            await comment_service.ownership_lookup.find_owner_id(RecipeId(recipe_id))
            subscription = await comment_service.subscribe(RecipeId(recipe_id), push)
        except NotFoundError as e:
            logfire.warn("Comment feed for unknown recipe", recipe_id=str(recipe_id))
            await websocket.close(code=WS_RECIPE_NOT_FOUND, reason=str(e))
            return

    try:
        while True:
            # Clients don't send anything; this only waits for the disconnect
            await websocket.receive_text()
    except WebSocketDisconnect:
        logfire.info("Comment feed client disconnected", recipe_id=str(recipe_id))
    finally:
        await subscription.close()
