"""Shared fixtures: stored experience records as the editor writes them."""

import copy

import pytest


def scene_object(object_id, content_type, url=None, position=None, rotation=None, scale=None, **content):
    """Authored scene object dict (camelCase, as stored)."""
    content = {"type": content_type, **content}
    if url is not None:
        content["url"] = url
    return {
        "id": object_id,
        "position": position or {"x": 0, "y": 0, "z": 0},
        "rotation": rotation or {"x": 0, "y": 0, "z": 0},
        "scale": scale or {"x": 1, "y": 1, "z": 1},
        "content": content,
    }


@pytest.fixture
def single_record():
    """Valid single-target record with one flush image."""
    return {
        "id": "exp-1",
        "title": "Poster",
        "mindFile": "/uploads/mind-files/poster.mind",
        "markerImage": "/uploads/markers/poster.jpg",
        "isMultipleTargets": False,
        "contentConfig": {
            "position": {"x": 0, "y": 0, "z": 0},
            "rotation": {"x": 0, "y": 0, "z": 0},
            "scale": {"x": 1, "y": 1, "z": 1},
            "sceneObjects": [scene_object("img-1", "image", "/uploads/images/cat.jpg")],
        },
        "targetsConfig": None,
    }


@pytest.fixture
def mixed_record(single_record):
    """Single-target record with one object of every content type."""
    record = copy.deepcopy(single_record)
    record["contentConfig"]["sceneObjects"] = [
        scene_object("img-1", "image", "/uploads/images/cat.jpg"),
        scene_object("vid-1", "video", "/uploads/videos/intro.mp4", position={"x": 0.5, "y": 0.1, "z": 0}),
        scene_object("mdl-1", "model", "/uploads/models/robot.glb", rotation={"x": 0, "y": 90, "z": 0}),
        scene_object("lgt-1", "light", intensity=0.5, color="#ff0000"),
        scene_object("aud-1", "audio", "/uploads/audio/theme.mp3"),
        scene_object("box-1", "primitive", primitiveType="sphere"),
    ]
    return record


@pytest.fixture
def multi_record():
    """Valid multi-target record: two targets with one object each."""
    return {
        "id": "exp-2",
        "title": "Gallery",
        "mindFile": "/uploads/mind-files/gallery.mind",
        "markerImage": "/uploads/markers/gallery-0.jpg",
        "isMultipleTargets": True,
        "contentConfig": {"sceneObjects": []},
        "targetsConfig": [
            {
                "id": "t-a",
                "name": "Front",
                "markerImage": "/uploads/markers/gallery-0.jpg",
                "sceneObjects": [scene_object("obj-1", "image", "/uploads/images/front.jpg")],
            },
            {
                "id": "t-b",
                "name": "Back",
                "markerImage": "/uploads/markers/gallery-1.jpg",
                "sceneObjects": [scene_object("obj-1", "audio", "/uploads/audio/back.mp3")],
            },
        ],
    }
