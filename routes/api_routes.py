"""JSON API routes."""

from __future__ import annotations

from flask import jsonify, request
from werkzeug.datastructures import MultiDict

from forms import CommentsQueryForm, ProcessCommentsForm
from services.comment_filters import filter_comments
from services.comment_pages import to_page
from services.comment_reconciler import CommentOptions, CommentsView, PipelineConfig, reconcile
from services.comment_session import CommentSession
from services.comment_sorter import sort_comments

_PROCESS_OPTIONS = ("nested", "max_depth", "sort")


def _form_errors(form) -> tuple:
    return jsonify({"error": "Invalid request", "fields": form.errors}), 400


def _view_payload(view: CommentsView, sort: str) -> dict:
    payload = view.to_dict()
    if sort and not view.enable_nested_comments:
        payload["display_comments"] = sort_comments(view.display_comments, sort)
    return payload


def _is_scalar(value) -> bool:
    return isinstance(value, (str, int, float))


def _is_post_with_comments(value) -> bool:
    return (
        isinstance(value, list)
        and len(value) == 2
        and all(isinstance(item, dict) and item.get("kind") == "Listing" for item in value)
    )


def _provided_comments(body: dict) -> list | None:
    """Comments posted as a list, a listing or a ``[post, comments]`` pair."""
    comments = body.get("comments")
    if isinstance(comments, dict) or _is_post_with_comments(comments):
        return filter_comments(list(to_page(comments).children))
    if isinstance(comments, list):
        return filter_comments(comments)
    return None


def register_api_routes(app, reader, cache) -> None:
    @app.route("/api/comments")
    def api_comments():
        form = CommentsQueryForm(formdata=request.args)
        if not form.validate():
            return _form_errors(form)

        options = CommentOptions(
            permalink=form.permalink.data,
            open=True,
            enable_infinite_loading=form.infinite.data,
            enable_nested_comments=form.nested.data,
            max_comment_depth=form.max_depth.data,
        )
        session = CommentSession(reader, options, cache=cache, sort=form.sort.data)
        session.open()
        if options.enable_infinite_loading and form.pages.data > 1:
            session.load_more(form.pages.data - 1)

        view = session.view()
        status = 502 if view.is_error else 200
        return jsonify(_view_payload(view, form.sort.data)), status

    @app.route("/api/comments/process", methods=["POST"])
    def api_process_comments():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return jsonify({"error": "Expected a JSON object"}), 400

        comments = _provided_comments(body)
        if comments is None:
            return jsonify({"error": "Invalid request", "fields": {"comments": ["This field is required."]}}), 400

        options = {key: body[key] for key in _PROCESS_OPTIONS if key in body}
        bad_fields = {
            key: ["Must be a string, number or boolean."] for key, value in options.items() if not _is_scalar(value)
        }
        if bad_fields:
            return jsonify({"error": "Invalid request", "fields": bad_fields}), 400

        form = ProcessCommentsForm(formdata=MultiDict(options))
        if not form.validate():
            return _form_errors(form)

        pipeline_config = PipelineConfig(
            nested_mode=form.nested.data,
            max_depth=form.max_depth.data,
            provided_comments=comments,
        )
        view = reconcile(pipeline_config)
        return jsonify(_view_payload(view, form.sort.data))

    @app.route("/api/health")
    def api_health():
        return jsonify({"status": "ok", "cache": cache.stats()})
