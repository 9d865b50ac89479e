# ==============================================================================
# PARSERS MODULE
# ==============================================================================
# Codecs for the resources stored in O2R archives.
#
# Supported formats:
#   - Resource header: 64-byte header + type registry (every resource)
#   - Animation: Link (header + data pair) and Actor animations, binary and C
#   - Text: message tables and the editable control-code text form
#   - Texture: RGBA/grayscale/palette textures decoded to RGBA8888
# ==============================================================================

from .resource_header import (
    ResourceEntry, ResourceHeader, RESOURCE_TYPES, RESOURCE_TAGS,
    parse_header, build_header, create_resource,
)
from .animation_parser import (
    AnimationType, JointIndex, LinkAnimation, ActorAnimation,
    parse_animation_from_resource, parse_animation_from_c, animation_to_c,
    animation_to_resources,
)
from .message_parser import (
    MessageEntry, parse_messages, messages_to_bytes, message_to_text, text_to_message,
)
from .texture_parser import TextureType, TextureData, parse_texture, decode_texture

__all__ = [
    # Resource header
    'ResourceEntry', 'ResourceHeader', 'RESOURCE_TYPES', 'RESOURCE_TAGS',
    'parse_header', 'build_header', 'create_resource',

    # Animation
    'AnimationType', 'JointIndex', 'LinkAnimation', 'ActorAnimation',
    'parse_animation_from_resource', 'parse_animation_from_c', 'animation_to_c',
    'animation_to_resources',

    # Messages
    'MessageEntry', 'parse_messages', 'messages_to_bytes', 'message_to_text',
    'text_to_message',

    # Textures
    'TextureType', 'TextureData', 'parse_texture', 'decode_texture',
]
