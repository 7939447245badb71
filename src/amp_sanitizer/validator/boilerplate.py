from typing import Tuple

# https://amp.dev/documentation/guides-and-tutorials/learn/spec/amp-boilerplate/
AMP_BOILERPLATE_STYLE = (
    "body{-webkit-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "-moz-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "-ms-animation:-amp-start 8s steps(1,end) 0s 1 normal both;"
    "animation:-amp-start 8s steps(1,end) 0s 1 normal both}"
    "@-webkit-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-moz-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-ms-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@-o-keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
    "@keyframes -amp-start{from{visibility:hidden}to{visibility:visible}}"
)

AMP_BOILERPLATE_NOSCRIPT_STYLE = (
    "body{-webkit-animation:none;-moz-animation:none;-ms-animation:none;animation:none}"
)


def get_boilerplate_stylesheets() -> Tuple[str, str]:
    """Returns the (visible, noscript) AMP boilerplate stylesheets."""
    return AMP_BOILERPLATE_STYLE, AMP_BOILERPLATE_NOSCRIPT_STYLE
