"""Fixed page chrome shared by every generated document.

Everything here is independent of the scene content: the runtime scripts,
the stylesheet, the loading overlay, the media control buttons and the
lifecycle script that wires tracking events to media playback.

The lifecycle script gives each tracking anchor this behaviour:

- scene loaded: hide the loading overlay after a short delay
- target found: hide the overlay, play the audio/video under that anchor
- target lost: pause all audio/video
- sound/video buttons: mute or unmute a media kind, independent of the above
"""

from __future__ import annotations

from string import Template

from ..core.config import RuntimeParams
from .markup import MarkupNode, RawText, element

STYLESHEET = """
    body {
      margin: 0;
      overflow: hidden;
      font-family: Arial, sans-serif;
    }

    .loading {
      position: fixed;
      top: 50%;
      left: 50%;
      transform: translate(-50%, -50%);
      color: white;
      background: rgba(0, 0, 0, 0.8);
      padding: 20px;
      border-radius: 10px;
      text-align: center;
      z-index: 1000;
    }

    .controls {
      position: fixed;
      bottom: 20px;
      left: 50%;
      transform: translateX(-50%);
      z-index: 100;
      display: flex;
      gap: 10px;
    }

    .control-btn {
      background: rgba(255, 255, 255, 0.9);
      border: none;
      padding: 10px 20px;
      border-radius: 25px;
      cursor: pointer;
      font-size: 16px;
      box-shadow: 0 2px 10px rgba(0, 0, 0, 0.3);
    }

    .control-btn:hover {
      background: white;
      transform: scale(1.05);
    }

    .audio-control {
      background: #4CAF50 !important;
      color: white !important;
    }

    .control-btn.muted {
      background: #f44336 !important;
      color: white !important;
    }
"""

LIFECYCLE_SCRIPT = Template("""
    document.addEventListener('DOMContentLoaded', function() {
      const loading = document.getElementById('loading');
      const scene = document.querySelector('a-scene');
      const audioToggle = document.getElementById('audioToggle');
      const videoToggle = document.getElementById('videoToggle');

      function hideLoading() {
        if (loading) {
          loading.style.display = 'none';
        }
      }

      // Media elements referenced by entities under root via a data attribute
      function mediaUnder(root, attribute) {
        const elements = [];
        root.querySelectorAll('[' + attribute + ']').forEach(function(entity) {
          const media = document.getElementById(entity.getAttribute(attribute));
          if (media) {
            elements.push(media);
          }
        });
        return elements;
      }

      function playAll(elements) {
        elements.forEach(function(media) {
          media.play().catch(function(e) {
            console.log('Media play failed:', e);
          });
        });
      }

      function pauseAll(elements) {
        elements.forEach(function(media) {
          media.pause();
        });
      }

      scene.addEventListener('loaded', function() {
        console.log('AR Scene loaded');
        setTimeout(hideLoading, $loading_hide_delay_ms);
      });

      document.querySelectorAll('[mindar-image-target]').forEach(function(target, index) {
        target.addEventListener('targetFound', function() {
          console.log('AR Target', index, 'found');
          hideLoading();
          playAll(mediaUnder(target, 'data-audio-id'));
          playAll(mediaUnder(target, 'data-video-id'));
        });

        target.addEventListener('targetLost', function() {
          console.log('AR Target', index, 'lost');
          pauseAll(mediaUnder(document, 'data-audio-id'));
          pauseAll(mediaUnder(document, 'data-video-id'));
        });
      });

      function bindMuteToggle(button, attribute, onLabel, offLabel) {
        if (!button) {
          return;
        }
        const elements = mediaUnder(document, attribute);
        if (elements.length === 0) {
          button.style.display = 'none';
          return;
        }
        button.addEventListener('click', function() {
          const muted = !button.classList.contains('muted');
          elements.forEach(function(media) {
            media.muted = muted;
          });
          button.textContent = muted ? offLabel : onLabel;
          button.classList.toggle('muted', muted);
        });
      }

      setTimeout(function() {
        bindMuteToggle(audioToggle, 'data-audio-id', '$sound_on', '$sound_off');
        bindMuteToggle(videoToggle, 'data-video-id', '$video_on', '$video_off');
      }, $controls_init_delay_ms);

      window.addEventListener('error', function(e) {
        console.error('AR Experience Error:', e.error);
      });

      // No context menu on long press
      document.addEventListener('contextmenu', function(e) {
        e.preventDefault();
      });
    });
""")

SOUND_ON_LABEL = "\U0001F50A Sound On"
SOUND_OFF_LABEL = "\U0001F507 Sound Off"
VIDEO_ON_LABEL = "\U0001F3AC Video On"
VIDEO_OFF_LABEL = "\U0001F3AC Video Off"


def head(title: str, runtime: RuntimeParams) -> MarkupNode:
    """Document head: metadata, runtime scripts and stylesheet."""
    return element(
        "head",
        element("meta", charset="utf-8"),
        element("meta", name="viewport", content="width=device-width, initial-scale=1.0, user-scalable=no"),
        element("title", f"AR Experience - {title}"),
        element("script", src=runtime.aframe_url),
        element("script", src=runtime.mindar_url),
        element("style", RawText(STYLESHEET)),
    )


def loading_overlay(multi_target: bool) -> MarkupNode:
    """Overlay shown until the scene loads or a marker is found."""
    hint = "Point your camera at any marker image" if multi_target else "Point your camera at the marker image"
    return element(
        "div",
        element("div", "Loading AR Experience..."),
        element("div", hint, style="margin-top: 10px; font-size: 14px;"),
        id="loading",
        class_="loading",
    )


def scene_attributes(mind_file: str, runtime: RuntimeParams) -> dict[str, str]:
    """Attributes of the <a-scene> element binding it to the tracking file."""
    tracking = (
        f"imageTargetSrc: {mind_file}; "
        f"filterMinCF:{runtime.filter_min_cf}; "
        f"filterBeta: {runtime.filter_beta}; "
        f"showStats: {'true' if runtime.show_stats else 'false'}"
    )
    return {
        "mindar-image": tracking,
        "vr-mode-ui": "enabled: false",
        "device-orientation-permission-ui": "enabled: false",
    }


def camera() -> MarkupNode:
    """Fixed camera; MindAR moves the anchors, not the camera."""
    return element(
        "a-camera",
        position="0 0 0",
        look_controls="enabled: false",
        cursor="fuse: false; rayOrigin: mouse",
    )


def media_controls(has_audio: bool, has_video: bool) -> MarkupNode:
    """Mute toggles, one per media kind present in the document."""
    controls = element("div", class_="controls")
    if has_audio:
        controls.append(element("button", SOUND_ON_LABEL, id="audioToggle", class_="control-btn audio-control"))
    if has_video:
        controls.append(element("button", VIDEO_ON_LABEL, id="videoToggle", class_="control-btn video-control"))
    return controls


def lifecycle_script(runtime: RuntimeParams) -> MarkupNode:
    """The event-wiring script; identical for every document with the same runtime settings."""
    source = LIFECYCLE_SCRIPT.substitute(
        loading_hide_delay_ms=runtime.loading_hide_delay_ms,
        controls_init_delay_ms=runtime.controls_init_delay_ms,
        sound_on=SOUND_ON_LABEL,
        sound_off=SOUND_OFF_LABEL,
        video_on=VIDEO_ON_LABEL,
        video_off=VIDEO_OFF_LABEL,
    )
    return element("script", RawText(source))
