#!/usr/bin/env python3
"""Example: Compile a small poster experience.

This script demonstrates the basic workflow for arscene:
1. Normalize a stored experience record
2. Inspect the resolved placements
3. Assemble and save the AR document

Run with: python examples/simple_experience.py
"""

from pathlib import Path

from arscene import ArsceneConfig, DocumentAssembler, ExperienceWriter, TransformResolver, normalize_experience


def create_poster_record() -> dict:
    """A stored record as the editor writes it: an image, a model and a light."""
    return {
        "id": "poster-demo",
        "title": "Poster Demo",
        "mindFile": "/uploads/mind-files/poster.mind",
        "markerImage": "/uploads/markers/poster.jpg",
        "isMultipleTargets": False,
        "contentConfig": {
            "sceneObjects": [
                {
                    "id": "cover",
                    "position": {"x": 0, "y": 0, "z": 0},
                    "content": {"type": "image", "url": "/uploads/images/cover.jpg"},
                },
                {
                    "id": "robot",
                    "position": {"x": 0.2, "y": 0.1, "z": 0},
                    "rotation": {"x": 0, "y": 1.57, "z": 0},
                    "scale": {"x": 0.5, "y": 0.5, "z": 0.5},
                    "content": {"type": "model", "url": "/uploads/models/robot.glb", "meshRef": {"uuid": "3f2a"}},
                },
                {
                    "id": "sun",
                    "content": {"type": "light", "intensity": "0.8"},
                },
            ],
        },
    }


def main():
    config = ArsceneConfig.default()
    config.output.experiences_dir = Path("example_output")

    print("arscene - Simple Experience Example")
    print("=" * 40)

    print("\n1. Normalizing record...")
    experience = normalize_experience(create_poster_record())
    print(f"   {experience!r}")

    print("\n2. Resolving placements...")
    resolver = TransformResolver(config.policy)
    for obj in experience.content_config.scene_objects:
        placement = resolver.resolve(obj)
        print(f"   {obj.id:6} {obj.content_type:6} pos=({placement.position}) rot=({placement.rotation})")

    print("\n3. Assembling document...")
    writer = ExperienceWriter(config.output)
    url = writer.publish(experience, DocumentAssembler.from_config(config))
    print(f"   Saved {writer.experience_path(experience.id)}")
    print(f"   Served at {url}")

    print("\n" + "=" * 40)
    print("Done! Open the document over HTTPS on a phone and point the camera at the marker.")


if __name__ == "__main__":
    main()
