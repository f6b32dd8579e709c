from handreplay.parser.hand_parser import parse_file, parse_hand, parse_hands, split_hands

__all__ = ["parse_file", "parse_hand", "parse_hands", "split_hands"]
